"""Request-scoped identity handed to every protected service call."""

from dataclasses import dataclass, field

from backend.models.enums import Role


@dataclass(frozen=True)
class LinkedStudent:
    id: int
    name: str


@dataclass(frozen=True)
class Principal:
    user_id: int
    email: str
    role: Role
    name: str
    student_id: int | None = None
    parent_id: int | None = None
    linked_students: tuple[LinkedStudent, ...] = field(default_factory=tuple)

    @property
    def profile_id(self) -> int:
        if self.role == Role.STUDENT:
            return self.student_id
        return self.parent_id

    @property
    def is_student(self) -> bool:
        return self.role == Role.STUDENT

    @property
    def is_parent(self) -> bool:
        return self.role == Role.PARENT
