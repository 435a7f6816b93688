from __future__ import annotations

from github import Github


def get_repo(repo_name: str, token: str):
    return Github(token).get_repo(repo_name)


def get_pull(repo, pr_number: int):
    return repo.get_pull(pr_number)


def get_issue_comments(pr):
    """Conversation comments on the PR, oldest first."""
    return list(pr.get_issue_comments())


def create_comment(pr, body: str):
    return pr.create_issue_comment(body)


def update_comment(pr, comment_id: int, body: str) -> None:
    pr.get_issue_comment(comment_id).edit(body)


def delete_comment(pr, comment_id: int) -> None:
    pr.get_issue_comment(comment_id).delete()


def create_commit_status(repo, sha: str, state: str, target_url: str, description: str, context: str):
    return repo.get_commit(sha).create_status(
        state=state,
        target_url=target_url,
        description=description,
        context=context,
    )
