import unittest
from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

from repocdn.cloudfront_utils import (
    InvalidationRequest,
    SubmittedInvalidation,
    build_invalidation_request,
    create_cloudfront_invalidation,
    make_caller_reference,
    wait_for_invalidation,
)
from repocdn.repo_config import RepoTarget

TARGET = RepoTarget("apt.datad0g.com", "E18ZGDURBK5K6X")


class TestCloudFrontUtils(unittest.TestCase):
    """Tests for CloudFront utility functions."""

    def test_make_caller_reference(self):
        now = datetime(2024, 3, 1, 12, 30, 5, 123456, tzinfo=timezone.utc)
        ref = make_caller_reference(["/dists/stable/Release", "/readme"], now=now)
        self.assertEqual(ref, "repocdn:2024-03-01T12:30:05.123456+00:00:/dists/stable/Release")

    def test_make_caller_reference_differs_between_runs(self):
        first = make_caller_reference(["/a"], now=datetime(2024, 1, 1, 0, 0, 0, 1, tzinfo=timezone.utc))
        second = make_caller_reference(["/a"], now=datetime(2024, 1, 1, 0, 0, 0, 2, tzinfo=timezone.utc))
        self.assertNotEqual(first, second)

    def test_build_invalidation_request_keeps_paths(self):
        request = build_invalidation_request(TARGET, ["/b", "/a", "/b"], caller_reference="ref")
        self.assertEqual(request, InvalidationRequest("E18ZGDURBK5K6X", ("/b", "/a", "/b"), "ref"))

    def test_build_invalidation_request_generates_reference(self):
        request = build_invalidation_request(TARGET, ["/readme"])
        self.assertTrue(request.caller_reference.startswith("repocdn:"))
        self.assertTrue(request.caller_reference.endswith(":/readme"))

    def test_as_batch(self):
        request = InvalidationRequest("DIST", ("/a", "/b"), "ref")
        self.assertEqual(
            request.as_batch(),
            {"Paths": {"Quantity": 2, "Items": ["/a", "/b"]}, "CallerReference": "ref"},
        )

    def test_create_cloudfront_invalidation(self):
        """Test creating a CloudFront invalidation."""
        mock_client = MagicMock()
        mock_client.create_invalidation.return_value = {
            "Location": "https://cloudfront.amazonaws.com/2020-05-31/distribution/DIST/invalidation/I1",
            "Invalidation": {"Id": "I1", "Status": "InProgress"},
        }

        result = create_cloudfront_invalidation(mock_client, InvalidationRequest("DIST", ("/*",), "custom-ref"))

        self.assertEqual(
            result,
            SubmittedInvalidation(
                "I1", "https://cloudfront.amazonaws.com/2020-05-31/distribution/DIST/invalidation/I1"
            ),
        )
        mock_client.create_invalidation.assert_called_once()
        call_args = mock_client.create_invalidation.call_args[1]
        assert call_args["DistributionId"] == "DIST"
        assert call_args["InvalidationBatch"]["Paths"]["Items"] == ["/*"]
        assert call_args["InvalidationBatch"]["Paths"]["Quantity"] == 1
        assert call_args["InvalidationBatch"]["CallerReference"] == "custom-ref"

    @patch("repocdn.cloudfront_utils.time.sleep")
    def test_wait_for_invalidation_success(self, mock_sleep):
        """Test waiting for an invalidation to complete successfully."""
        mock_client = MagicMock()
        mock_client.get_invalidation.return_value = {"Invalidation": {"Status": "Completed"}}

        result = wait_for_invalidation(mock_client, "test-dist-id", "test-inv-id")

        assert result is True
        mock_client.get_invalidation.assert_called_once_with(DistributionId="test-dist-id", Id="test-inv-id")
        mock_sleep.assert_not_called()

    @patch("repocdn.cloudfront_utils.time.sleep")
    def test_wait_for_invalidation_polls_until_complete(self, mock_sleep):
        mock_client = MagicMock()
        mock_client.get_invalidation.side_effect = [
            {"Invalidation": {"Status": "InProgress"}},
            {"Invalidation": {"Status": "Completed"}},
        ]

        assert wait_for_invalidation(mock_client, "test-dist-id", "test-inv-id", interval=3) is True
        mock_sleep.assert_called_once_with(3)

    @patch("repocdn.cloudfront_utils.time.sleep")
    @patch("repocdn.cloudfront_utils.time.time")
    def test_wait_for_invalidation_timeout(self, mock_time, mock_sleep):
        """Test waiting for an invalidation that times out."""
        # Start time, then a check already past the timeout
        mock_time.side_effect = [0, 601]
        mock_client = MagicMock()

        result = wait_for_invalidation(mock_client, "test-dist-id", "test-inv-id", timeout=600)

        assert result is False
        mock_client.get_invalidation.assert_not_called()
        mock_sleep.assert_not_called()
