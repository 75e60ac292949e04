import pytest

from labhub.policies.permissions import (
    Actor,
    Capabilities,
    PermissionBag,
    can_delete_project,
    can_submit_project,
    can_view_all_projects,
    capabilities,
)
from labhub.tests.conftest import make_actor


def test_super_admin_has_everything_even_with_empty_bag():
    caps = capabilities(make_actor("r", "super_admin"))
    assert caps == Capabilities(approve=True, reject=True, edit=True, delete=True)


@pytest.mark.parametrize("role", ["view_only", "VIEW_ONLY"])
def test_view_only_is_denied_whatever_the_bag_says(role):
    actor = make_actor("v", role, can_approve=True, can_edit=True, can_delete=True)
    assert capabilities(actor) == Capabilities()
    assert not can_delete_project(actor)
    assert not can_submit_project(actor)


def test_other_roles_rely_on_the_bag():
    assert capabilities(make_actor("a", "admin")) == Capabilities()

    caps = capabilities(make_actor("a", "admin", can_approve=True))
    assert caps.approve and caps.reject
    assert not caps.edit and not caps.delete

    caps = capabilities(make_actor("f", "faculty", can_edit=True, can_delete=True))
    assert caps.edit and caps.delete
    assert not caps.approve


def test_missing_actor_or_role_yields_nothing():
    assert capabilities(None) == Capabilities()
    assert capabilities(Actor(id="x", role="")) == Capabilities()
    assert capabilities(make_actor("x", "janitor")) == Capabilities()


def test_bag_from_claims_only_accepts_true_flags():
    bag = PermissionBag.from_claims({"can_approve": "yes", "can_edit": True, "extra": True})
    assert bag == PermissionBag(can_approve=False, can_edit=True, can_delete=False)
    assert PermissionBag.from_claims(None) == PermissionBag()


def test_view_all_projects():
    assert can_view_all_projects(make_actor("v", "view_only"))
    assert can_view_all_projects(make_actor("f", "faculty"))
    assert can_view_all_projects(make_actor("s", "student", can_edit=True))
    assert not can_view_all_projects(make_actor("s", "student"))
    assert not can_view_all_projects(None)
