import pytest

from backend.core.errors import ForbiddenError
from backend.models.document import Document
from backend.models.enums import ApplicationType, DocumentType, Role
from backend.services import applications, notes, relationships, scoping


def _document(db, student_id: int, application_id: int | None = None, document_type=DocumentType.OTHER) -> Document:
    document = Document(
        student_id=student_id,
        filename='f.pdf',
        original_name='f.pdf',
        mime_type='application/pdf',
        size=1,
        path=f'{student_id}/f.pdf',
        document_type=document_type,
        application_id=application_id,
    )
    db.add(document)
    db.commit()
    return document


def test_parent_sees_only_linked_students_applications(db, world) -> None:
    mine = applications.create_application(db, world.alice, world.u1.id, ApplicationType.EARLY_ACTION)
    applications.create_application(db, world.dave, world.u1.id, ApplicationType.EARLY_ACTION)

    assert [application.id for application in scoping.list_applications_for_parent(db, world.bob)] == [mine.id]
    assert scoping.list_applications_for_parent(db, world.carol) == []


def test_parent_student_filter_only_narrows(db, world) -> None:
    mine = applications.create_application(db, world.alice, world.u1.id, ApplicationType.EARLY_ACTION)
    applications.create_application(db, world.dave, world.u2.id, ApplicationType.EARLY_ACTION)

    narrowed = scoping.list_applications_for_parent(db, world.bob, student_id=world.alice.student_id)
    foreign = scoping.list_applications_for_parent(db, world.bob, student_id=world.dave.student_id)

    assert [application.id for application in narrowed] == [mine.id]
    assert foreign == []


def test_parent_with_several_students_sees_each(db, world) -> None:
    relationships.link_student(db, world.bob.parent_id, 'dave@x.com')
    first = applications.create_application(db, world.alice, world.u1.id, ApplicationType.EARLY_ACTION)
    second = applications.create_application(db, world.dave, world.u2.id, ApplicationType.REGULAR_DECISION)

    listed = {application.id for application in scoping.list_applications_for_parent(db, world.bob)}

    assert listed == {first.id, second.id}


def test_student_lists_only_own_applications_newest_first(db, world) -> None:
    first = applications.create_application(db, world.alice, world.u1.id, ApplicationType.EARLY_ACTION)
    second = applications.create_application(db, world.alice, world.u2.id, ApplicationType.EARLY_ACTION)
    applications.create_application(db, world.dave, world.u1.id, ApplicationType.EARLY_ACTION)

    listed = scoping.list_applications_for_student(db, world.alice)

    assert [application.id for application in listed] == [second.id, first.id]


def test_list_queries_enforce_role(db, world) -> None:
    with pytest.raises(ForbiddenError):
        scoping.list_applications_for_student(db, world.bob)
    with pytest.raises(ForbiddenError):
        scoping.list_applications_for_parent(db, world.alice)
    with pytest.raises(ForbiddenError):
        scoping.list_documents(db, world.bob)


def test_documents_are_scoped_to_the_student_whatever_the_filters(db, world) -> None:
    alice_application = applications.create_application(db, world.alice, world.u1.id, ApplicationType.EARLY_ACTION)
    dave_application = applications.create_application(db, world.dave, world.u1.id, ApplicationType.EARLY_ACTION)
    own = _document(db, world.alice.student_id, alice_application.id, DocumentType.ESSAY)
    _document(db, world.alice.student_id)
    _document(db, world.dave.student_id, dave_application.id, DocumentType.ESSAY)

    assert len(scoping.list_documents(db, world.alice)) == 2
    assert [document.id for document in scoping.list_documents(db, world.alice, application_id=alice_application.id)] == [own.id]
    assert scoping.list_documents(db, world.alice, application_id=dave_application.id) == []
    assert [document.id for document in scoping.list_documents(db, world.alice, document_type=DocumentType.ESSAY)] == [own.id]


def test_visible_notes_are_filtered_per_viewer(db, world, register, principal_for) -> None:
    second_parent = register('erin@x.com', Role.PARENT, parent_student_email='alice@x.com')
    erin = principal_for(second_parent)
    application = applications.create_application(db, world.alice, world.u1.id, ApplicationType.EARLY_ACTION)
    bob_note = notes.add_note(db, world.bob, application.id, 'From Bob')
    erin_note = notes.add_note(db, erin, application.id, 'From Erin')
    db.refresh(application)

    assert {note.id for note in scoping.visible_notes(application, world.alice)} == {bob_note.id, erin_note.id}
    assert [note.id for note in scoping.visible_notes(application, world.bob)] == [bob_note.id]
    assert [note.id for note in scoping.visible_notes(application, erin)] == [erin_note.id]
    assert scoping.visible_notes(application, world.dave) == []


def test_oversized_filters_yield_empty_lists(db, world) -> None:
    applications.create_application(db, world.alice, world.u1.id, ApplicationType.EARLY_ACTION)
    _document(db, world.alice.student_id)

    assert scoping.list_applications_for_parent(db, world.bob, student_id=2**70) == []
    assert scoping.list_documents(db, world.alice, application_id=2**70) == []
    assert scoping.list_documents(db, world.alice, requirement_id=2**64) == []
