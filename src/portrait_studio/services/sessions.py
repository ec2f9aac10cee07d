"""In-memory sessions for requests being composed."""

from dataclasses import dataclass, field

from portrait_studio.domain.sessions import ImageRole, Session
from portrait_studio.services.classifier import classify


@dataclass
class InMemorySessionStore:
    """Process-local session map; contents are lost on restart."""

    _sessions: dict[str, Session] = field(default_factory=dict)

    def get(self, user_id: str) -> Session | None:
        """Return the user's session, if one exists."""
        return self._sessions.get(user_id)

    def get_or_create(self, user_id: str) -> Session:
        """Return the user's session, creating an empty one if needed."""
        session = self._sessions.get(user_id)
        if session is None:
            session = Session()
            self._sessions[user_id] = session
        return session

    def clear(self, user_id: str) -> None:
        """Drop the user's session."""
        self._sessions.pop(user_id, None)


@dataclass
class SessionService:
    """Mutations of a user's in-progress request."""

    store: InMemorySessionStore

    def get(self, user_id: str) -> Session | None:
        return self.store.get(user_id)

    def clear(self, user_id: str) -> None:
        self.store.clear(user_id)

    def set_model_name(self, user_id: str, model_name: str) -> Session:
        """Set the model name used in the generation prompt."""
        session = self.store.get_or_create(user_id)
        session.model_name = model_name
        return session

    def add_photo(self, user_id: str, image_url: str) -> tuple[ImageRole, int]:
        """Classify and store a photo; return its role and the bucket size."""
        session = self.store.get_or_create(user_id)
        role = classify(session)
        if role is ImageRole.BASE:
            session.base_images.append(image_url)
            return role, len(session.base_images)
        session.ref_images.append(image_url)
        return role, len(session.ref_images)

    def add_references(self, user_id: str, image_urls: list[str]) -> int:
        """Append fetched reference images; return the reference count."""
        session = self.store.get_or_create(user_id)
        session.ref_images.extend(image_urls)
        return len(session.ref_images)
