"""Tests for the role and user attribute bag codecs."""

from authz_engine.features.identity import RoleAttributeBag, UserAttributeBag


class TestRoleAttributeBag:
    def test_decode_reserved_and_custom_keys(self):
        bag = RoleAttributeBag.decode(
            {
                "permissions": ["documents:read", "documents:read", "reports:read"],
                "childRoles": ["viewer"],
                "authzVersion": ["4"],
                "department": ["finance", "ignored"],
                "empty": [],
            }
        )

        assert bag.permissions == ["documents:read", "reports:read"]
        assert bag.child_roles == ["viewer"]
        assert bag.version == 4
        assert bag.custom == {"department": "finance"}

    def test_decode_empty(self):
        bag = RoleAttributeBag.decode(None)
        assert bag.permissions == []
        assert bag.version == 0

    def test_malformed_version_reads_as_zero(self):
        assert RoleAttributeBag.decode({"authzVersion": ["abc"]}).version == 0

    def test_encode(self):
        bag = RoleAttributeBag(permissions=["documents:read"], custom={"department": "finance"}, version=2)
        assert bag.encode() == {
            "department": ["finance"],
            "permissions": ["documents:read"],
            "authzVersion": ["2"],
        }

    def test_encode_keeps_child_role_mirror(self):
        attributes = RoleAttributeBag(child_roles=["viewer"]).encode()
        assert attributes["childRoles"] == ["viewer"]


class TestUserAttributeBag:
    def test_unrelated_attributes_survive_a_round_trip(self):
        original = {
            "directPermissions": ["reports:export"],
            "authzVersion": ["1"],
            "locale": ["en"],
            "phone": ["+1", "+2"],
        }
        bag = UserAttributeBag.decode(original)
        bag.direct_permissions.append("reports:read")
        bag.version += 1

        assert bag.encode() == {
            "locale": ["en"],
            "phone": ["+1", "+2"],
            "directPermissions": ["reports:export", "reports:read"],
            "authzVersion": ["2"],
        }

    def test_missing_keys(self):
        bag = UserAttributeBag.decode({"locale": ["en"]})
        assert bag.direct_permissions == []
        assert bag.version == 0
        assert bag.other == {"locale": ["en"]}
