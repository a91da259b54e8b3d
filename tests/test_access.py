"""
Tests for the access builder.
"""

import pytest

from grantkit.core import Access
from grantkit.grants import GrantStore
from grantkit.types import AccessControlError, AccessInfo, ErrorCode, EXTEND_KEY


@pytest.fixture
def store():
    """Create an empty grant store"""
    return GrantStore()


class TestAccessBuilder:
    """Test building grants with the access builder"""

    def test_subject_pre_created(self, store):
        """Test that subjects exist before any action is committed"""
        Access(store, ["user", "guest"])
        assert store.get_grants() == {"user": {}, "guest": {}}

    def test_action_methods(self, store):
        """Test every action method commits its key"""
        Access(store, "user") \
            .create_own("video").create_any("video") \
            .read_own("video").read_any("video") \
            .update_own("video").update_any("video") \
            .delete_own("video").delete_any("video")
        assert sorted(store.get("user")["video"]) == [
            "create:any", "create:own", "delete:any", "delete:own",
            "read:any", "read:own", "update:any", "update:own",
        ]

    def test_aliases_default_to_any(self, store):
        """Test that the short action names grant any possession"""
        Access(store, "user").create("a").read("b").update("c").delete("d")
        grants = store.get_grants()["user"]
        assert grants == {
            "a": {"create:any": ["*"]},
            "b": {"read:any": ["*"]},
            "c": {"update:any": ["*"]},
            "d": {"delete:any": ["*"]},
        }

    def test_resource_and_attributes(self, store):
        """Test setting the resource and attributes before the action"""
        Access(store, "user").resource("video").attributes(["title", "!id"]).read_own()
        assert store.get("user")["video"]["read:own"] == ["title", "!id"]

    def test_attributes_reset_after_commit(self, store):
        """Test that attributes do not carry over to the next action"""
        Access(store, "user").read_any("video", ["title"]).update_any("video")
        assert store.get("user")["video"] == {
            "read:any": ["title"],
            "update:any": ["*"],
        }

    def test_explicit_empty_attributes(self, store):
        """Test that an explicit empty list grants no attributes"""
        Access(store, "user").read_any("video", [])
        assert store.get("user")["video"]["read:any"] == []

    def test_invalid_attributes(self, store):
        """Test that attributes must be strings"""
        with pytest.raises(AccessControlError) as exc_info:
            Access(store, "user").read_any("video", [1, 2])
        assert exc_info.value.error_code == ErrorCode.INVALID_SHAPE

    def test_deny_clears_attributes(self, store):
        """Test that denials ignore given attributes"""
        Access(store, "user", denied=True).attributes(["title"]).read_any("video", ["*"])
        assert store.get("user")["video"]["read:any"] == []

    def test_chained_grant_and_deny(self, store):
        """Test switching subject and polarity within a chain"""
        access = Access(store, "user").read_any("video")
        admin = access.grant("admin").extend("user").delete_any("video")
        admin.deny("guest").read_any("video")

        assert admin is not access
        assert store.get("admin") == {EXTEND_KEY: ["user"], "video": {"delete:any": ["*"]}}
        assert store.get("guest")["video"]["read:any"] == []

    def test_do(self, store):
        """Test committing a compound action string"""
        Access(store, "user").do("video:update:own", ["title"]).do("photo:read")
        assert store.get("user") == {
            "video": {"update:own": ["title"]},
            "photo": {"read:any": ["*"]},
        }

    def test_do_invalid(self, store):
        """Test that malformed compound actions are rejected"""
        with pytest.raises(AccessControlError) as exc_info:
            Access(store, "user").do("video")
        assert exc_info.value.error_code == ErrorCode.INVALID_ACTION
        with pytest.raises(AccessControlError) as exc_info:
            Access(store, "user").do("video:watch")
        assert exc_info.value.error_code == ErrorCode.INVALID_ACTION


class TestAccessRecord:
    """Test constructing the builder from a record"""

    def test_complete_record_committed(self, store):
        """Test that a complete record is committed immediately"""
        Access(store, {"subject": "user", "resource": "video", "action": "read:own",
                       "attributes": "title, views"})
        assert store.get("user")["video"]["read:own"] == ["title", "views"]

    def test_record_with_empty_attributes(self, store):
        """Test that a grant record with no attributes grants all of them"""
        Access(store, {"subject": "user", "resource": "video", "action": "read:any",
                       "attributes": []})
        assert store.get("user")["video"]["read:any"] == ["*"]

    def test_denied_record(self, store):
        """Test that the builder polarity overrides the record"""
        Access(store, AccessInfo(subject="user", resource="video", action="read",
                                 attributes=["*"]), denied=True)
        assert store.get("user")["video"]["read:any"] == []

    def test_partial_record_not_committed(self, store):
        """Test that an incomplete record waits for an action method"""
        access = Access(store, {"subject": "user", "resource": "video"})
        assert store.get_grants() == {}
        access.read_any()
        assert store.get("user")["video"]["read:any"] == ["*"]

    def test_empty_record(self, store):
        """Test that an empty record is rejected"""
        with pytest.raises(AccessControlError) as exc_info:
            Access(store, {})
        assert exc_info.value.error_code == ErrorCode.INVALID_SHAPE

    def test_invalid_argument(self, store):
        """Test that unsupported arguments are rejected"""
        with pytest.raises(AccessControlError) as exc_info:
            Access(store, 42)
        assert exc_info.value.error_code == ErrorCode.INVALID_SHAPE


class TestAccessValidation:
    """Test builder validation"""

    def test_reserved_resource(self, store):
        """Test that reserved resource names are rejected"""
        with pytest.raises(AccessControlError) as exc_info:
            Access(store, "user").resource("!")
        assert exc_info.value.error_code == ErrorCode.INVALID_NAME

    def test_extend_without_subject(self, store):
        """Test that extending requires a subject"""
        with pytest.raises(AccessControlError) as exc_info:
            Access(store).extend("user")
        assert exc_info.value.error_code == ErrorCode.INVALID_NAME

    def test_missing_resource(self, store):
        """Test that an action without a resource is rejected"""
        with pytest.raises(AccessControlError) as exc_info:
            Access(store, "user").read_any()
        assert exc_info.value.error_code == ErrorCode.INVALID_NAME

    def test_locked_store(self, store):
        """Test that the builder cannot modify a locked store"""
        access = Access(store, "user").read_any("video")
        access.lock()
        with pytest.raises(AccessControlError) as exc_info:
            access.update_any("video")
        assert exc_info.value.error_code == ErrorCode.LOCKED
        with pytest.raises(AccessControlError):
            access.grant("admin")
