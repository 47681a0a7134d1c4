from unittest.mock import MagicMock

import pytest

from cubeai import models
from cubeai.errors import EntityNotFoundError, ErrorCode
from cubeai.schemas import ProjectCreateRequest, ProjectSaveRequest
from cubeai.services import ProjectService


@pytest.fixture
def repos():
    return {
        "project_repo": MagicMock(),
        "history_repo": MagicMock(),
        "member_repo": MagicMock(),
        "curriculum_repo": MagicMock(),
    }


@pytest.fixture
def service(repos):
    return ProjectService(**repos)


def test_create_project_saves_project_for_member_and_curriculum(service, repos, member_factory):
    member = member_factory(1)
    curriculum = models.Curriculum(id=2)
    saved = models.Project(id=10, member=member, curriculum=curriculum)
    repos["member_repo"].find_by_id.return_value = member
    repos["curriculum_repo"].find_by_id.return_value = curriculum
    repos["project_repo"].save.return_value = saved

    response = service.create_project(1, ProjectCreateRequest(curriculum_id=2))

    assert response.id == 10
    assert response.curriculum_id == 2
    repos["member_repo"].find_by_id.assert_called_once_with(1)
    repos["curriculum_repo"].find_by_id.assert_called_once_with(2)
    repos["project_repo"].save.assert_called_once()
    built = repos["project_repo"].save.call_args.args[0]
    assert isinstance(built, models.Project)
    assert built.id is None
    assert built.member is member
    assert built.curriculum is curriculum


def test_create_project_throws_when_member_missing(service, repos):
    repos["member_repo"].find_by_id.return_value = None

    with pytest.raises(EntityNotFoundError) as exc:
        service.create_project(99, ProjectCreateRequest(curriculum_id=1))

    assert exc.value.error_code is ErrorCode.MEMBER_NOT_FOUND
    assert str(exc.value) == ErrorCode.MEMBER_NOT_FOUND.message
    repos["project_repo"].save.assert_not_called()


def test_create_project_throws_when_curriculum_missing(service, repos, member_factory):
    repos["member_repo"].find_by_id.return_value = member_factory(1)
    repos["curriculum_repo"].find_by_id.return_value = None

    with pytest.raises(EntityNotFoundError) as exc:
        service.create_project(1, ProjectCreateRequest(curriculum_id=404))

    assert str(exc.value) == ErrorCode.CURRICULUM_NOT_FOUND.message
    repos["project_repo"].save.assert_not_called()


def test_save_project_persists_history(service, repos, member_factory):
    structure = '{ "nodes": [] }'
    project = models.Project(id=3, member=member_factory(1), curriculum=None)
    saved = models.ProjectHistory(id=7, project=project, structure=structure)
    repos["project_repo"].find_by_id.return_value = project
    repos["history_repo"].save.return_value = saved

    response = service.save_project(3, ProjectSaveRequest(structure=structure))

    assert response.id == 7
    assert response.structure == structure
    built = repos["history_repo"].save.call_args.args[0]
    assert built.project is project
    assert built.structure == structure


def test_save_project_passes_structure_through_unchanged(service, repos, member_factory):
    structure = '{"nodes":[{"id":"a","label":"ü"}],  "edges": []}\n'
    project = models.Project(id=3, member=member_factory(1))
    repos["project_repo"].find_by_id.return_value = project
    repos["history_repo"].save.side_effect = lambda h: models.ProjectHistory(
        id=8, project=h.project, structure=h.structure
    )

    response = service.save_project(3, ProjectSaveRequest(structure=structure))

    assert response.structure == structure


def test_save_project_throws_when_project_missing(service, repos):
    repos["project_repo"].find_by_id.return_value = None

    with pytest.raises(EntityNotFoundError) as exc:
        service.save_project(42, ProjectSaveRequest(structure="{}"))

    assert exc.value.error_code is ErrorCode.PROJECT_NOT_FOUND
    repos["history_repo"].save.assert_not_called()


def test_get_project_history_throws_when_project_missing(service, repos):
    repos["project_repo"].find_by_id.return_value = None

    with pytest.raises(EntityNotFoundError) as exc:
        service.get_project_history(42)

    assert str(exc.value) == ErrorCode.PROJECT_NOT_FOUND.message


def test_get_project_history_lists_snapshots_in_store_order(service, repos, member_factory):
    project = models.Project(id=3, member=member_factory(1))
    repos["project_repo"].find_by_id.return_value = project
    repos["history_repo"].find_all_by_project.return_value = [
        models.ProjectHistory(id=12, project=project, structure="b"),
        models.ProjectHistory(id=11, project=project, structure="a"),
    ]

    responses = service.get_project_history(3)

    assert [r.id for r in responses] == [12, 11]
    repos["history_repo"].find_all_by_project.assert_called_once_with(project)


def test_get_project_history_is_empty_for_unsaved_project(service, repos, member_factory):
    repos["project_repo"].find_by_id.return_value = models.Project(id=3, member=member_factory(1))
    repos["history_repo"].find_all_by_project.return_value = []

    assert service.get_project_history(3) == []


def test_get_project_history_detail_throws_when_history_missing(service, repos):
    repos["history_repo"].find_by_id.return_value = None

    with pytest.raises(EntityNotFoundError) as exc:
        service.get_project_history_detail(100)

    assert str(exc.value) == ErrorCode.PROJECT_HISTORY_NOT_FOUND.message


def test_get_project_history_detail_returns_structure(service, repos, member_factory):
    project = models.Project(id=3, member=member_factory(1))
    repos["history_repo"].find_by_id.return_value = models.ProjectHistory(
        id=100, project=project, structure='{"nodes": [1]}'
    )

    detail = service.get_project_history_detail(100)

    assert detail.id == 100
    assert detail.project_id == 3
    assert detail.structure == '{"nodes": [1]}'


def test_get_projects_returns_project_list(service, repos, member_factory):
    member = member_factory(5)
    repos["member_repo"].find_by_id.return_value = member
    repos["project_repo"].find_all_by_member.return_value = [models.Project(id=8, member=member, curriculum=None)]

    responses = service.get_projects(5)

    assert len(responses) == 1
    assert responses[0].id == 8
    repos["project_repo"].find_all_by_member.assert_called_once_with(member)


def test_get_projects_returns_empty_list_for_member_without_projects(service, repos, member_factory):
    repos["member_repo"].find_by_id.return_value = member_factory(5)
    repos["project_repo"].find_all_by_member.return_value = []

    assert service.get_projects(5) == []


def test_get_projects_throws_when_member_missing(service, repos):
    repos["member_repo"].find_by_id.return_value = None

    with pytest.raises(EntityNotFoundError) as exc:
        service.get_projects(5)

    assert exc.value.error_code is ErrorCode.MEMBER_NOT_FOUND
    repos["project_repo"].find_all_by_member.assert_not_called()
