"""
Badge Service - CRUD for achievement badges.
"""

from student_hub.errors import BadgeNotFound, ValidationError
from student_hub.models.badge import Badge
from student_hub.services import uploads
from student_hub.services.identifiers import is_valid_object_id
from student_hub.logging_config import get_logger, log_with_context

logger = get_logger("db")


class BadgeService:

    def __init__(self, badges):
        self.badges = badges

    def list_badges(self) -> list:
        return self.badges.all()

    def get_badge(self, badge_id: str) -> Badge:
        badge = self.badges.find_by_id(badge_id) if is_valid_object_id(badge_id) else None
        if badge is None:
            raise BadgeNotFound(badge_id)
        return badge

    def create_badge(self, title, description, image=None) -> Badge:
        if image is None:
            raise ValidationError("Badge image is required")
        new_image = uploads.save_image(uploads.BADGE_IMAGES, image)
        badge = Badge(title=title, description=description, image=new_image)
        try:
            badge = self.badges.add(badge)
        except Exception:
            uploads.remove_file(new_image)
            raise
        log_with_context(logger, "INFO", "Created badge: {}".format(title),
                         context={"badge_id": str(badge.id)})
        return badge

    def update_badge(self, badge_id: str, title=None, description=None, image=None) -> Badge:
        """Blank title/description keep the current values; a new image replaces the old file."""
        badge = self.get_badge(badge_id)
        badge.title = title or badge.title
        badge.description = description or badge.description

        old_image = new_image = None
        if image is not None:
            old_image = badge.image
            new_image = uploads.save_image(uploads.BADGE_IMAGES, image)
            badge.image = new_image

        try:
            badge = self.badges.save(badge)
        except Exception:
            uploads.remove_file(new_image)
            raise
        uploads.remove_file(old_image)
        return badge

    def delete_badge(self, badge_id: str) -> None:
        badge = self.get_badge(badge_id)
        image = badge.image
        self.badges.delete(badge)
        uploads.remove_file(image)
