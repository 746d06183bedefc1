import json
from unittest.mock import MagicMock, patch

from localbiz import main_job
from localbiz.models import BusinessListing
from localbiz.terms import render_terms


def test_parse_args_snapshot(tmp_path):
    args = main_job.parse_args(["snapshot", "--search", "cafe", "--output", str(tmp_path / "out.json"), "--upload"])
    assert args.command == "snapshot"
    assert args.search == "cafe"
    assert args.category == ""
    assert args.upload is True
    assert args.func is main_job.run_snapshot


def test_build_snapshot():
    listings = [
        BusinessListing(id="google_1", name="Cafe Nush", category="cafe", is_google_business=True),
        BusinessListing(id="local-1", name="Zambezi Car Wash", category="car wash"),
    ]
    snapshot = main_job.build_snapshot(listings)
    assert snapshot["categories"] == ["cafe", "car wash"]
    assert snapshot["businesses"][0]["isGoogleBusiness"] is True


def test_snapshot_writes_file_and_skips_upload(tmp_path, db, places):
    output = tmp_path / "nested" / "directory.json"
    args = main_job.parse_args(["snapshot", "--output", str(output)])

    with patch.object(main_job, "get_supabase", return_value=db), \
            patch.object(main_job, "get_places", return_value=places), \
            patch.object(main_job.config, "GOOGLE_PLACES_API_KEY", "test-key"), \
            patch.object(main_job, "upload_to_s3") as upload:
        main_job.run_snapshot(args)

    payload = json.loads(output.read_text())
    assert [b["name"] for b in payload["businesses"]] == ["Cafe Nush"]
    upload.assert_not_called()


def test_upload_to_s3(tmp_path):
    artifact = tmp_path / "directory.json"
    artifact.write_text("{}")
    s3 = MagicMock()

    with patch.object(main_job.config, "S3_BUCKET", "bucket"), \
            patch.object(main_job.boto3, "client", return_value=s3):
        assert main_job.upload_to_s3(artifact) is True

    s3.upload_file.assert_called_once()
    assert s3.upload_file.call_args.args[1:] == ("bucket", main_job.config.S3_KEY)


def test_upload_skipped_without_bucket(tmp_path):
    with patch.object(main_job.config, "S3_BUCKET", None):
        assert main_job.upload_to_s3(tmp_path / "directory.json") is False


def test_terms_are_numbered(capsys):
    main_job.main(["terms"])
    out = capsys.readouterr().out
    assert out == render_terms() + "\n"
    assert "1. Eligibility" in out
