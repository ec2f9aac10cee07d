"""Role assignment for incoming photos."""

from portrait_studio.domain.sessions import ImageRole, Session

BASE_IMAGE_TARGET = 2


def classify(session: Session) -> ImageRole:
    """Decide whether the next photo is a base or a reference image.

    Photos are base images until a model name is set and two base images
    exist. Photos sent before /model are therefore always base images, even
    past the two-image target.
    """
    if not session.model_name or len(session.base_images) < BASE_IMAGE_TARGET:
        return ImageRole.BASE
    return ImageRole.REFERENCE
