"""
Badges API routes - CRUD for achievement badges (multipart, image upload).
"""

from typing import Optional
from fastapi import APIRouter, Depends, File, Form, UploadFile

from student_hub.dependencies import get_badge_service
from student_hub.routes.responses import failure, success
from student_hub.serializers import serialize_badge
from student_hub.services.badges import BadgeService

router = APIRouter()


def _file_or_none(upload: Optional[UploadFile]) -> Optional[UploadFile]:
    if upload is None or not upload.filename:
        return None
    return upload


@router.get("/api/badges")
def list_badges(service: BadgeService = Depends(get_badge_service)):
    try:
        badges = service.list_badges()
    except Exception as e:
        return failure("Failed to retrieve badges.", e)
    return success("Badges retrieved successfully", [serialize_badge(b) for b in badges])


@router.get("/api/badges/{badge_id}")
def get_badge(badge_id: str, service: BadgeService = Depends(get_badge_service)):
    try:
        badge = service.get_badge(badge_id)
    except Exception as e:
        return failure("Failed to retrieve badge with ID: {}".format(badge_id), e,
                       context={"badge_id": badge_id})
    return success("Badge retrieved successfully", serialize_badge(badge))


@router.post("/api/badges")
def create_badge(
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    service: BadgeService = Depends(get_badge_service)
):
    try:
        badge = service.create_badge(title, description, image=_file_or_none(image))
    except Exception as e:
        return failure("Failed to create badge. Please check the input data.", e)
    return success("Badge created successfully", serialize_badge(badge), status_code=201)


@router.put("/api/badges/{badge_id}")
def update_badge(
    badge_id: str,
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    service: BadgeService = Depends(get_badge_service)
):
    try:
        badge = service.update_badge(badge_id, title=title, description=description,
                                     image=_file_or_none(image))
    except Exception as e:
        return failure("Failed to update badge with ID: {}. Please check the input data.".format(badge_id),
                       e, context={"badge_id": badge_id})
    return success("Badge updated successfully", serialize_badge(badge))


@router.delete("/api/badges/{badge_id}")
def delete_badge(badge_id: str, service: BadgeService = Depends(get_badge_service)):
    try:
        service.delete_badge(badge_id)
    except Exception as e:
        return failure("Failed to delete badge with ID: {}".format(badge_id), e,
                       context={"badge_id": badge_id})
    return success("Badge deleted successfully")
