"""Terms and Conditions accepted at sign-up."""

from typing import Tuple

PREAMBLE = (
    'These Terms of Service ("Terms") govern your use of the directory website, services, and features '
    '(collectively, the "Platform"). By accessing or using the Platform, you agree to these Terms. '
    "If you do not agree, you may not use our Platform."
)

SECTIONS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("Eligibility", (
        "You must be at least 18 years old, or the age of majority in your jurisdiction, to use the Platform.",
    )),
    ("User Accounts", (
        "You may need to create an account to submit reviews or add businesses.",
        "You are responsible for keeping your login details secure.",
        "You agree to provide accurate information when registering and to update it as needed.",
    )),
    ("User-Generated Content", (
        "You are solely responsible for the reviews, ratings, and business listings you post.",
        "Your Content must be truthful, based on your genuine experience, and not misleading or defamatory.",
        "You own your Content, but grant us a non-exclusive, royalty-free license to display it on the Platform.",
        "We may remove or edit Content at our discretion.",
    )),
    ("Adding Businesses", (
        "Users may submit businesses to be listed on the Platform.",
        "You must provide accurate information and may not create fake or misleading business profiles.",
        "Adding a business does not imply our endorsement or verification of that business.",
        "If you add a business, you may review it only once every 14 days.",
    )),
    ("Prohibited Conduct", (
        "Do not post false, defamatory, or fraudulent information.",
        "Do not submit reviews in exchange for payment or incentives without clear disclosure.",
        "Do not impersonate another person or business.",
        "Do not use automated tools (bots, scrapers) to access the Platform.",
    )),
    ("Notice & Takedown", (
        "If you believe Content or a business listing is false, harmful, or infringes your rights, notify us.",
        "We will review and, if appropriate, remove or restrict the Content.",
    )),
    ("Disclaimers", (
        "We do not guarantee the accuracy, reliability, or completeness of any reviews or business listings.",
        "Reviews and ratings reflect the opinions of users, not our own views.",
        'The Platform is provided "as is" without warranties of any kind.',
    )),
    ("Termination", (
        "We may suspend or terminate your account if you violate these Terms.",
    )),
    ("Changes to Terms", (
        "Continued use of the Platform after changes means you accept the updated Terms.",
    )),
)


def render_terms() -> str:
    lines = ["Terms and Conditions", "", PREAMBLE]
    for number, (heading, clauses) in enumerate(SECTIONS, start=1):
        lines.append("")
        lines.append(f"{number}. {heading}")
        lines.extend(f"  - {clause}" for clause in clauses)
    return "\n".join(lines)
