from datetime import datetime

import pytest

from backend.core.errors import ConflictError, ForbiddenError, NotFoundError
from backend.models.application import Application, ApplicationRequirement
from backend.models.enums import ApplicationStatus, ApplicationType, DecisionType, RequirementStatus, RequirementType
from backend.services import applications


def test_create_application_starts_not_started(db, world) -> None:
    application = applications.create_application(
        db, world.alice, world.u1.id, ApplicationType.EARLY_DECISION, deadline=datetime(2025, 11, 1), notes='ED pick',
    )

    assert application.student_id == world.alice.student_id
    assert application.status == ApplicationStatus.NOT_STARTED
    assert application.deadline == datetime(2025, 11, 1)
    assert application.notes == 'ED pick'


def test_duplicate_application_is_a_conflict(db, world) -> None:
    applications.create_application(db, world.alice, world.u1.id, ApplicationType.REGULAR_DECISION)

    with pytest.raises(ConflictError) as exception_info:
        applications.create_application(db, world.alice, world.u1.id, ApplicationType.REGULAR_DECISION)

    assert exception_info.value.message == applications.DUPLICATE_APPLICATION_MESSAGE
    assert db.query(Application).count() == 1


def test_same_university_under_another_plan_or_student_is_allowed(db, world) -> None:
    applications.create_application(db, world.alice, world.u1.id, ApplicationType.EARLY_ACTION)
    applications.create_application(db, world.alice, world.u1.id, ApplicationType.REGULAR_DECISION)
    applications.create_application(db, world.dave, world.u1.id, ApplicationType.EARLY_ACTION)

    assert db.query(Application).count() == 3


def test_unknown_university_is_not_found(db, world) -> None:
    with pytest.raises(NotFoundError) as exception_info:
        applications.create_application(db, world.alice, 9999, ApplicationType.EARLY_ACTION)

    assert exception_info.value.message == 'University not found.'


def test_oversized_university_id_is_not_found(db, world) -> None:
    with pytest.raises(NotFoundError):
        applications.create_application(db, world.alice, 2**70, ApplicationType.EARLY_ACTION)

    assert db.query(Application).count() == 0


def test_parents_cannot_create_applications(db, world) -> None:
    with pytest.raises(ForbiddenError):
        applications.create_application(db, world.bob, world.u1.id, ApplicationType.EARLY_ACTION)


def test_owner_can_move_status_freely(db, world) -> None:
    application = applications.create_application(db, world.alice, world.u1.id, ApplicationType.EARLY_ACTION)

    applications.update_application(db, world.alice, application.id, {'status': 'DECISION_RECEIVED', 'decision_type': 'ACCEPTED'})
    updated = applications.update_application(db, world.alice, application.id, {'status': ApplicationStatus.IN_PROGRESS})

    assert updated.status == ApplicationStatus.IN_PROGRESS
    assert updated.decision_type == DecisionType.ACCEPTED


def test_update_ignores_null_status_and_unknown_fields(db, world) -> None:
    application = applications.create_application(db, world.alice, world.u1.id, ApplicationType.EARLY_ACTION)

    updated = applications.update_application(
        db, world.alice, application.id, {'status': None, 'notes': 'call counselor', 'student_id': world.dave.student_id},
    )

    assert updated.status == ApplicationStatus.NOT_STARTED
    assert updated.notes == 'call counselor'
    assert updated.student_id == world.alice.student_id


def test_other_student_cannot_touch_an_application(db, world) -> None:
    application = applications.create_application(db, world.alice, world.u1.id, ApplicationType.EARLY_ACTION)

    with pytest.raises(NotFoundError) as exception_info:
        applications.update_application(db, world.dave, application.id, {'status': 'SUBMITTED'})
    with pytest.raises(NotFoundError):
        applications.delete_application(db, world.dave, application.id)

    assert exception_info.value.message == 'Application not found.'
    db.refresh(application)
    assert application.status == ApplicationStatus.NOT_STARTED


def test_linked_parent_can_read_but_not_update(db, world) -> None:
    application = applications.create_application(db, world.alice, world.u1.id, ApplicationType.EARLY_ACTION)

    assert applications.get_application(db, world.bob, application.id).id == application.id
    with pytest.raises(NotFoundError):
        applications.update_application(db, world.bob, application.id, {'status': 'SUBMITTED'})


def test_delete_application_removes_requirements(db, world) -> None:
    application = applications.create_application(db, world.alice, world.u1.id, ApplicationType.EARLY_ACTION)
    applications.add_requirement(db, world.alice, application.id, RequirementType.ESSAY)

    applications.delete_application(db, world.alice, application.id)

    assert db.query(Application).count() == 0
    assert db.query(ApplicationRequirement).count() == 0


def test_requirement_lifecycle_for_owner(db, world) -> None:
    application = applications.create_application(db, world.alice, world.u1.id, ApplicationType.EARLY_ACTION)

    requirement = applications.add_requirement(db, world.alice, application.id, RequirementType.TRANSCRIPT, notes='ask school')
    assert requirement.status == RequirementStatus.NOT_STARTED

    updated = applications.update_requirement(db, world.alice, requirement.id, {'status': 'COMPLETED'})
    assert updated.status == RequirementStatus.COMPLETED
    assert applications.get_requirement(db, world.bob, requirement.id).id == requirement.id

    applications.delete_requirement(db, world.alice, requirement.id)
    assert db.query(ApplicationRequirement).count() == 0


def test_requirements_of_another_student_are_not_found(db, world) -> None:
    application = applications.create_application(db, world.alice, world.u1.id, ApplicationType.EARLY_ACTION)
    requirement = applications.add_requirement(db, world.alice, application.id, RequirementType.ESSAY)

    with pytest.raises(NotFoundError):
        applications.add_requirement(db, world.dave, application.id, RequirementType.ESSAY)
    with pytest.raises(NotFoundError) as exception_info:
        applications.update_requirement(db, world.dave, requirement.id, {'status': 'COMPLETED'})
    with pytest.raises(NotFoundError):
        applications.delete_requirement(db, world.bob, requirement.id)

    assert exception_info.value.message == 'Requirement not found.'
    assert db.query(ApplicationRequirement).count() == 1
