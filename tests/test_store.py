"""
Tests for the grant store.
"""

import pytest

from grantkit.grants import GrantStore
from grantkit.types import (
    AccessControlError,
    AccessInfo,
    ErrorCode,
    EXTEND_KEY,
)


@pytest.fixture
def grants():
    """Create a nested grants model"""
    return {
        "admin": {
            "video": {
                "create:any": ["*"],
                "read:any": ["*"],
                "delete:any": ["*"],
            },
            EXTEND_KEY: ["user"],
        },
        "user": {
            "video": {
                "create:own": ["*", "!rating"],
                "read:any": ["*", "!views"],
            },
        },
    }


@pytest.fixture
def store(grants):
    """Create a store loaded with the nested grants model"""
    return GrantStore(grants)


class TestBulkLoad:
    """Test loading grants into the store"""

    def test_load_mapping(self, store):
        """Test loading a nested grants mapping"""
        assert store.get_roles() == ["admin", "user"]
        assert store.get_resources() == ["video"]
        assert store.hierarchy_of("admin") == ["admin", "user"]

    def test_load_flat_list(self):
        """Test loading a flat list of records"""
        store = GrantStore([
            {"subject": "user", "resource": "video", "action": "create:own",
             "attributes": "*, !rating"},
            {"subject": "user", "resource": "video", "action": "read",
             "possession": "any"},
            AccessInfo(subject=["admin"], resource="video", action="delete"),
        ])
        grants = store.get_grants()
        assert grants["user"]["video"]["create:own"] == ["*", "!rating"]
        assert grants["user"]["video"]["read:any"] == ["*"]
        assert grants["admin"]["video"]["delete:any"] == ["*"]

    def test_action_keys_normalized(self):
        """Test that structured input keys are normalized"""
        store = GrantStore({"user": {"video": {"READ": ["title"], "update:OWN": []}}})
        assert store.get_grants() == {
            "user": {"video": {"read:any": ["title"], "update:own": []}}
        }

    def test_invalid_shape(self):
        """Test that unsupported inputs are rejected"""
        store = GrantStore()
        with pytest.raises(AccessControlError) as exc_info:
            store.set_grants("admin")
        assert exc_info.value.error_code == ErrorCode.INVALID_SHAPE

    def test_invalid_attributes(self):
        """Test that attribute lists must hold non-empty strings"""
        with pytest.raises(AccessControlError) as exc_info:
            GrantStore({"user": {"video": {"read:any": ["*", ""]}}})
        assert exc_info.value.error_code == ErrorCode.INVALID_SHAPE

    def test_reserved_resource_name(self):
        """Test that reserved names cannot be resources"""
        with pytest.raises(AccessControlError) as exc_info:
            GrantStore({"user": {"*": {"read:any": ["*"]}}})
        assert exc_info.value.error_code == ErrorCode.INVALID_NAME

    def test_invalid_possession(self):
        """Test that unknown possessions are rejected"""
        with pytest.raises(AccessControlError) as exc_info:
            GrantStore([{"subject": "user", "resource": "video", "action": "read:all"}])
        assert exc_info.value.error_code == ErrorCode.INVALID_ACTION

    def test_failed_load_keeps_model(self, store, grants):
        """Test that a failed load leaves the prior model in place"""
        with pytest.raises(AccessControlError):
            store.set_grants({"user": {EXTEND_KEY: ["ghost"]}})
        assert store.get_grants() == grants

    def test_round_trip(self, store):
        """Test that get_grants output loads into an equivalent store"""
        copy = GrantStore(store.get_grants())
        assert copy.get_grants() == store.get_grants()

    def test_get_grants_is_copy(self, store):
        """Test that get_grants does not expose the live model"""
        store.get_grants()["user"]["video"]["read:any"].append("views")
        assert store.get_grants()["user"]["video"]["read:any"] == ["*", "!views"]


class TestCommit:
    """Test committing access records"""

    def test_commit_creates_entries(self):
        """Test that missing subjects and resources are created"""
        store = GrantStore()
        store.commit(AccessInfo(subject=["a", "b"], resource=["x", "y"],
                                action="read", possession="own"))
        for subject in ("a", "b"):
            for resource in ("x", "y"):
                assert store.get(subject)[resource]["read:own"] == ["*"]

    def test_last_write_wins(self):
        """Test that the exact key is overwritten"""
        store = GrantStore()
        store.commit({"subject": "a", "resource": "x", "action": "read:any",
                      "attributes": ["title"]}, True)
        store.commit({"subject": "a", "resource": "x", "action": "read:any",
                      "attributes": ["body"]}, True)
        assert store.get("a")["x"] == {"read:any": ["body"]}

    def test_denied_commit_clears_attributes(self):
        """Test that denials always store no attributes"""
        store = GrantStore()
        store.commit({"subject": "a", "resource": "x", "action": "read",
                      "attributes": ["title"], "denied": True}, True)
        assert store.get("a")["x"]["read:any"] == []

    def test_reserved_subject_rejected(self):
        """Test that reserved subject names are rejected"""
        store = GrantStore()
        with pytest.raises(AccessControlError) as exc_info:
            store.commit({"subject": "$", "resource": "x", "action": "read"}, True)
        assert exc_info.value.error_code == ErrorCode.INVALID_NAME

    def test_empty_record_rejected(self):
        """Test that an empty record is rejected"""
        store = GrantStore()
        with pytest.raises(AccessControlError) as exc_info:
            store.commit({}, True)
        assert exc_info.value.error_code == ErrorCode.INVALID_SHAPE


class TestRemoval:
    """Test removing subjects, resources and permissions"""

    def test_remove_roles_prunes_inheritance(self, store):
        """Test that removed subjects are pruned from inheritance lists"""
        store.remove_roles("user")
        assert store.get_roles() == ["admin"]
        assert EXTEND_KEY not in store.get("admin")
        assert store.hierarchy_of("admin") == ["admin"]

    def test_remove_missing_role(self, store, grants):
        """Test that removing an unknown subject fails without changes"""
        with pytest.raises(AccessControlError) as exc_info:
            store.remove_roles(["user", "ghost"])
        assert exc_info.value.error_code == ErrorCode.NOT_FOUND
        assert store.get_grants() == grants

    def test_remove_resources_for_all(self, store):
        """Test removing a resource from every subject"""
        store.remove_resources("video")
        assert store.get_resources() == []
        assert store.get("admin") == {EXTEND_KEY: ["user"]}

    def test_remove_resources_for_subject(self, store):
        """Test removing a resource from selected subjects"""
        store.remove_resources(["video"], ["user"])
        assert "video" not in store.get("user")
        assert "video" in store.get("admin")

    def test_remove_resources_invalid(self, store):
        """Test that an empty resource list is rejected"""
        with pytest.raises(AccessControlError) as exc_info:
            store.remove_resources([])
        assert exc_info.value.error_code == ErrorCode.INVALID_NAME

    def test_remove_permission_key(self, store):
        """Test removing a single action-possession key"""
        store.remove_permission("video", "admin", "delete")
        assert store.get("admin")["video"] == {
            "create:any": ["*"],
            "read:any": ["*"],
        }


class TestLock:
    """Test locking the grants model"""

    def test_lock_is_idempotent(self, store):
        """Test that locking twice has the same effect as once"""
        store.lock()
        store.lock()
        assert store.locked is True

    @pytest.mark.parametrize("mutate", [
        lambda s: s.set_grants({"a": {}}),
        lambda s: s.reset(),
        lambda s: s.commit({"subject": "a", "resource": "x", "action": "read"}, True),
        lambda s: s.pre_create_roles("a"),
        lambda s: s.extend_role("user", "admin"),
        lambda s: s.remove_roles("user"),
        lambda s: s.remove_resources("video"),
        lambda s: s.remove_permission("video", None, "read"),
    ])
    def test_mutators_fail_when_locked(self, store, grants, mutate):
        """Test that every mutator fails once locked"""
        store.lock()
        for _ in range(2):
            with pytest.raises(AccessControlError) as exc_info:
                mutate(store)
            assert exc_info.value.error_code == ErrorCode.LOCKED
        assert store.get_grants() == grants

    def test_locked_model_is_read_only(self, store):
        """Test that the live model cannot be modified after locking"""
        store.lock()
        with pytest.raises(TypeError):
            store.grants["user"]["video"]["read:any"] = ["*"]
        with pytest.raises(AttributeError):
            store.grants["user"]["video"]["read:any"].append("views")

    def test_lock_empty_model(self):
        """Test that an empty model cannot be locked"""
        with pytest.raises(AccessControlError) as exc_info:
            GrantStore().lock()
        assert exc_info.value.error_code == ErrorCode.EMPTY_MODEL


class TestIntrospection:
    """Test store introspection"""

    def test_has_role(self, store):
        """Test subject existence checks"""
        assert store.has_role("admin")
        assert store.has_role(["admin", "user"])
        assert not store.has_role(["admin", "ghost"])
        assert "user" in store
        assert len(store) == 2

    def test_has_resource(self, store):
        """Test resource existence checks"""
        assert store.has_resource("video")
        assert not store.has_resource(EXTEND_KEY)
        assert not store.has_resource("")
        assert not store.has_resource(["video", "photo"])
