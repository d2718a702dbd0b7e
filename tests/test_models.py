"""
Tests for repository identifiers and shared records.
"""

from prsync.github.repository import RepositoryRef
from prsync.models import (
    ChangeStatus,
    FileMode,
    LocalCommit,
    PullRequestOptions,
    RemoteTreeEntry,
    ReviewerRequest,
    strip_org_prefix,
)


class TestRepositoryRef:
    def test_parse(self):
        ref = RepositoryRef.parse("octo/widgets")
        assert ref.owner == "octo"
        assert ref.name == "widgets"
        assert ref.full_name == "octo/widgets"
        assert ref.api_path == "/repos/octo/widgets"

    def test_splits_on_first_slash_only(self):
        ref = RepositoryRef.parse("octo/widgets/extra")
        assert ref.owner == "octo"
        assert ref.name == "widgets/extra"

    def test_malformed_is_not_rejected(self):
        ref = RepositoryRef.parse("no-slash")
        assert ref.owner == "no-slash"
        assert ref.name == ""


class TestReviewerRequest:
    def test_team_names_are_stripped(self):
        request = ReviewerRequest.from_names(["octo/alice"], ["octo/team-name", "bare-team"])

        assert request.reviewers == ("octo/alice",)
        assert request.team_reviewers == ("team-name", "bare-team")

    def test_empty_request_is_falsy(self):
        assert not ReviewerRequest.from_names([], [])
        assert ReviewerRequest.from_names([], []).to_kwargs() == {}

    def test_kwargs_only_carry_non_empty_lists(self):
        request = ReviewerRequest.from_names(["bob"], [])
        assert request.to_kwargs() == {"reviewers": ["bob"]}

    def test_options_build_request(self):
        options = PullRequestOptions(branch="b", base="main", title="t", team_reviewers=["org/core"])
        assert options.reviewer_request.team_reviewers == ("core",)

    def test_strip_org_prefix(self):
        assert strip_org_prefix("org/team") == "team"
        assert strip_org_prefix("team") == "team"


class TestRecords:
    def test_upload_statuses(self):
        assert ChangeStatus.ADDED.requires_upload
        assert ChangeStatus.MODIFIED.requires_upload
        assert not ChangeStatus.DELETED.requires_upload
        assert not ChangeStatus.TYPE_CHANGED.requires_upload

    def test_tree_entry_payload(self):
        entry = RemoteTreeEntry(path="gone.txt", mode=FileMode.REGULAR, sha=None)
        assert entry.to_payload() == {"path": "gone.txt", "mode": "100644", "type": "blob", "sha": None}

    def test_commit_message(self):
        commit = LocalCommit(sha="a", parents=["b"], tree="c", subject="Subject", body="Body")
        assert commit.message == "Subject\n\nBody"
