"""
In-memory stand-in for the GitHub host.

Exposes the slice of PyGithub the code uses (Github.get_repo, the
requester's REST and GraphQL calls, refs, pulls and issue metadata) and
records every write in `host.calls`.
"""

import hashlib
import re
import threading
from types import SimpleNamespace

import pytest
from github import GithubException, UnknownObjectException


class FakeGitRef:
    def __init__(self, host, full_name, branch):
        self.host = host
        self.full_name = full_name
        self.branch = branch
        self.ref = f"refs/heads/{branch}"

    @property
    def object(self):
        # PyGithub only requests the ref when an attribute is first read
        self.host.raise_if_failing("get_ref")
        sha = self.host.refs.get((self.full_name, self.branch))
        if sha is None:
            raise UnknownObjectException(404, {"message": "Not Found"}, {})
        return SimpleNamespace(sha=sha)

    def edit(self, sha, force=False):
        self.host.record("update_ref", ref=f"heads/{self.branch}", sha=sha, force=force)
        self.host.raise_if_failing("update_ref")
        self.host.refs[(self.full_name, self.branch)] = sha


class FakeIssue:
    def __init__(self, pull):
        self.pull = pull

    def edit(self, milestone=None):
        self.pull.host.record("set_milestone", number=self.pull.number, milestone=milestone.number)
        self.pull.host.raise_if_failing("set_milestone")
        self.pull.milestone = milestone.number


class FakePullRequest:
    def __init__(self, host, number, head, base, title, body, draft):
        self.host = host
        self.number = number
        self.html_url = f"https://github.com/{host.base_full_name}/pull/{number}"
        self.head = head
        self.base = base
        self.title = title
        self.body = body
        self.draft = draft
        self.state = "open"
        self.milestone = None
        self.labels = []
        self.assignees = []
        self.requested_reviewers = []
        self.requested_teams = []

    def edit(self, title=None, body=None):
        self.host.record("update_pull", number=self.number, title=title, body=body)
        if title is not None:
            self.title = title
        if body is not None:
            self.body = body

    def as_issue(self):
        return FakeIssue(self)

    def add_to_labels(self, *labels):
        self.host.record("add_labels", number=self.number, labels=list(labels))
        self.host.raise_if_failing("add_labels")
        self.labels.extend(labels)

    def add_to_assignees(self, *assignees):
        self.host.record("add_assignees", number=self.number, assignees=list(assignees))
        self.host.raise_if_failing("add_assignees")
        self.assignees.extend(assignees)

    def create_review_request(self, reviewers=None, team_reviewers=None):
        self.host.record(
            "request_reviewers",
            number=self.number,
            reviewers=reviewers,
            team_reviewers=team_reviewers,
        )
        self.host.raise_if_failing("request_reviewers")
        self.requested_reviewers.extend(reviewers or [])
        self.requested_teams.extend(team_reviewers or [])


class FakeRepository:
    def __init__(self, host, full_name):
        self.host = host
        self.full_name = full_name

    @property
    def parent(self):
        parent = self.host.parents.get(self.full_name)
        return SimpleNamespace(full_name=parent) if parent else None

    def get_git_ref(self, ref):
        return FakeGitRef(self.host, self.full_name, ref[len("heads/"):])

    def create_git_ref(self, ref, sha):
        branch = ref[len("refs/heads/"):]
        self.host.record("create_ref", ref=ref, sha=sha)
        self.host.raise_if_failing("create_ref")
        if (self.full_name, branch) in self.host.refs:
            raise GithubException(422, {"message": "Reference already exists"}, {})
        self.host.refs[(self.full_name, branch)] = sha
        return FakeGitRef(self.host, self.full_name, branch)

    def create_pull(self, base, head, title=None, body=None, draft=False, head_repo=None):
        self.host.record(
            "create_pull", base=base, head=head, title=title, body=body, draft=draft, head_repo=head_repo
        )
        self.host.raise_if_failing("create_pull")
        for pull in self.host.pulls:
            if pull.state == "open" and pull.head == head and pull.base == base:
                raise GithubException(
                    422,
                    {
                        "message": "Validation Failed",
                        "errors": [
                            {
                                "resource": "PullRequest",
                                "code": "custom",
                                "message": f"A pull request already exists for {head}.",
                            }
                        ],
                    },
                    {},
                )
        pull = FakePullRequest(self.host, len(self.host.pulls) + 1, head, base, title, body, draft)
        self.host.pulls.append(pull)
        return pull

    def get_pulls(self, state="open", head=None, base=None):
        self.host.record("list_pulls", state=state, head=head, base=base)
        return [
            p
            for p in self.host.pulls
            if p.state == state and (head is None or p.head == head) and (base is None or p.base == base)
        ]

    def get_milestone(self, number):
        return SimpleNamespace(number=number)


class FakeRequester:
    def __init__(self, host):
        self.host = host

    def requestJsonAndCheck(self, verb, url, parameters=None, headers=None, input=None):
        return {}, self.host.rest(verb, url, input)

    def graphql_query(self, query, variables):
        return {}, {"data": self.host.graphql(query, variables)}


class FakeGithub:
    """Stands in for github.Github."""

    def __init__(self, host):
        self.host = host
        self.requester = FakeRequester(host)

    def get_repo(self, full_name):
        return FakeRepository(self.host, full_name)


class FakeHost:
    GIT_DATA = re.compile(r"^/repos/(?P<repo>[^/]+/[^/]+)/git/(?P<kind>blobs|trees|commits)$")

    def __init__(self, base_full_name="octo/widgets"):
        self.base_full_name = base_full_name
        self.blobs = {}
        self.trees = {}
        self.commits = {}
        self.refs = {}
        self.pulls = []
        self.parents = {}
        self.calls = []
        self.failures = {}
        self.before_push_commit = None
        self._lock = threading.Lock()
        self._counter = 0

    # bookkeeping

    def record(self, name, **payload):
        with self._lock:
            self.calls.append((name, payload))

    def calls_named(self, name):
        return [payload for call, payload in self.calls if call == name]

    def call_names(self):
        return [name for name, _ in self.calls]

    def fail(self, name, exc):
        self.failures[name] = exc

    def raise_if_failing(self, name):
        if name in self.failures:
            raise self.failures[name]

    def new_sha(self, kind):
        with self._lock:
            self._counter += 1
            return hashlib.sha1(f"{kind}-{self._counter}".encode()).hexdigest()

    def ref_id(self, full_name, branch):
        return f"REF_{full_name}_{branch}"

    # REST git data

    def rest(self, verb, url, payload):
        match = self.GIT_DATA.match(url)
        assert verb == "POST" and match, f"unexpected request {verb} {url}"
        kind = match.group("kind")
        name = {"blobs": "create_blob", "trees": "create_tree", "commits": "create_commit"}[kind]
        self.record(name, repo=match.group("repo"), **payload)
        self.raise_if_failing(name)

        sha = self.new_sha(kind)
        if kind == "blobs":
            self.blobs[sha] = payload["content"]
        elif kind == "trees":
            self.trees[sha] = payload
        else:
            self.commits[sha] = payload
        return {"sha": sha}

    # GraphQL

    def graphql(self, query, variables):
        if "GetRefId" in query:
            self.record("query_ref", **variables)
            self.raise_if_failing("query_ref")
            full_name = f"{variables['repoOwner']}/{variables['repoName']}"
            sha = self.refs.get((full_name, variables["branchName"]))
            ref = None
            if sha is not None:
                ref = {
                    "id": self.ref_id(full_name, variables["branchName"]),
                    "name": variables["branchName"],
                    "prefix": "refs/heads/",
                    "target": {"id": f"C_{sha}", "oid": sha},
                }
            return {"repository": {"id": f"R_{full_name}", "ref": ref}}

        if "CreateNewBranch" in query:
            self.record("graphql_create_ref", **variables)
            self.raise_if_failing("graphql_create_ref")
            full_name = variables["repoId"][len("R_"):]
            branch = variables["branchName"][len("refs/heads/"):]
            self.refs[(full_name, branch)] = variables["oid"]
            return {"createRef": {"ref": {"id": self.ref_id(full_name, branch), "name": branch, "prefix": "refs/heads/"}}}

        if "PushCommit" in query:
            self.record("create_commit_on_branch", **variables)
            if self.before_push_commit is not None:
                self.before_push_commit()
            full_name = variables["repoNameWithOwner"]
            branch = variables["branchName"]
            current = self.refs.get((full_name, branch))
            if current != variables["headOid"]:
                raise GithubException(
                    400,
                    {
                        "data": None,
                        "errors": [
                            {
                                "type": "STALE_DATA",
                                "message": f'Expected branch to point to "{variables["headOid"]}" '
                                f'but it did not. Pull and try again.',
                            }
                        ],
                    },
                    {},
                )
            sha = self.new_sha("signed")
            self.commits[sha] = {"parents": [current], "fileChanges": variables["fileChanges"]}
            self.refs[(full_name, branch)] = sha
            return {
                "createCommitOnBranch": {
                    "ref": {"id": self.ref_id(full_name, branch), "name": branch, "prefix": "refs/heads/"},
                    "commit": {"id": f"C_{sha}", "abbreviatedOid": sha[:7], "oid": sha},
                }
            }

        raise AssertionError(f"unexpected GraphQL document: {query}")


class DictReader:
    """ContentReader over a {path: bytes} mapping."""

    def __init__(self, files):
        self.files = files
        self.reads = []

    def read_file(self, commit_sha, path):
        self.reads.append((commit_sha, path))
        return self.files[path]


@pytest.fixture
def host():
    return FakeHost()


@pytest.fixture
def gh(host):
    return FakeGithub(host)
