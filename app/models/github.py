"""
Student Project Tracker
Local mirror of GitHub activity per project.

Models:
    - GitHubCommit: unique on (project_id, sha).
    - GitHubPullRequest: unique on (project_id, pr_number).

Rows are written only through app.services.github_sync_service, which
upserts on those keys for both the pull sync and the webhook path.
"""

from datetime import datetime, timezone

from app.models import db

PR_STATUSES = ("open", "closed", "merged")


class GitHubCommit(db.Model):
    __tablename__ = "github_commits"
    __table_args__ = (
        db.UniqueConstraint("project_id", "sha", name="uq_github_commit_sha"),
        db.Index("idx_github_commits_ts", "project_id", "timestamp"),
    )

    id = db.Column(db.Integer, primary_key=True)
    project_id = db.Column(
        db.String(36),
        db.ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
    )
    sha = db.Column(db.String(64), nullable=False)
    message = db.Column(db.Text, nullable=True)
    author = db.Column(db.String(200), nullable=True)
    timestamp = db.Column(db.DateTime(timezone=True), nullable=True)
    synced_at = db.Column(
        db.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "project_id": self.project_id,
            "sha": self.sha,
            "message": self.message,
            "author": self.author,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
        }


class GitHubPullRequest(db.Model):
    __tablename__ = "github_pull_requests"
    __table_args__ = (
        db.UniqueConstraint("project_id", "pr_number", name="uq_github_pr_number"),
        db.Index("idx_github_prs_created", "project_id", "created_at"),
    )

    id = db.Column(db.Integer, primary_key=True)
    project_id = db.Column(
        db.String(36),
        db.ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
    )
    pr_number = db.Column(db.Integer, nullable=False)
    title = db.Column(db.String(500), nullable=True)
    status = db.Column(db.String(20), nullable=False, default="open")  # open | closed | merged
    author = db.Column(db.String(200), nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), nullable=True)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=True)

    def to_dict(self):
        return {
            "id": self.id,
            "project_id": self.project_id,
            "pr_number": self.pr_number,
            "title": self.title,
            "status": self.status,
            "author": self.author,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
