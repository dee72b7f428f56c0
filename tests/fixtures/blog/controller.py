from __future__ import annotations

from typing import Annotated

from classschema.core.markers import IgnoreValidation, Validate
from classschema.domain import ControllerInterface

from blog.domain.model import Post
from blog.domain.repository import PostRepository
from blog.service import Mailer, PostLogger


class PostController(ControllerInterface):
    """Handles post requests."""

    def __init__(self, repository: PostRepository, page_size: int = 10):
        self.repository = repository
        self.page_size = page_size

    @Validate("NotEmpty", param="title")
    @Validate("StringLength", {"maximum": 80}, "title")
    @IgnoreValidation("post")
    def update_action(self, post: Post, title: str) -> None:
        """Update the title of a post."""

    def create_action(
        self,
        post: Annotated[Post, IgnoreValidation()],
        title: Annotated[str, Validate("NotEmpty")],
    ) -> None:
        pass

    @Validate("Integer", param="uid")
    def show_action(self, uid, format="html"):
        """Show a post.

        :param int uid: Uid of the post
        :param str format: Output format
        :return: The rendered post
        :author: Jane Doe
        :deprecated: use :meth:`detail_action`
        """

    def archive_action(self, post, reason=None):
        """Archive a post.

        Args:
            post (Post): The post to archive
            reason (str, optional): Why the post is archived

        Returns:
            Nothing.
        """

    def list_action(self, *tags: str, page: int | None = None) -> list[Post]:
        return []

    def inject_logger(self, logger: PostLogger) -> None:
        self.logger = logger

    def injectMailer(self, mailer: Mailer) -> None:  # noqa: N802
        self.mailer = mailer

    def inject_settings(self, settings: Mailer) -> None:
        self.settings = settings

    def inject_page_size(self, page_size: int) -> None:
        self.page_size = page_size

    def inject_pair(self, logger: PostLogger, mailer: Mailer) -> None:
        self.logger, self.mailer = logger, mailer

    @staticmethod
    def route_name() -> str:
        return "post"

    @classmethod
    def create(cls, repository: PostRepository) -> PostController:
        return cls(repository)

    def _render(self, post: Post) -> str:
        return post.title

    def __audit(self, message: str) -> None:
        pass
