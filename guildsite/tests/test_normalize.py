import copy
import unittest

from guildsite.normalize import (
    default_avatar_index,
    normalize_message,
    normalize_messages,
    normalize_owner,
    resolve_avatar_url,
)

GUILD_ID = "1336782145833668729"


def _member(member_avatar=None, user_avatar=None, discriminator="0", user_id="433262414759198720"):
    return {
        "user": {
            "id": user_id,
            "username": "urnisa",
            "global_name": "Urnisa",
            "discriminator": discriminator,
            "avatar": user_avatar,
        },
        "nick": "Boss",
        "avatar": member_avatar,
    }


def _message(message_id, **extra):
    message = {
        "id": message_id,
        "content": f"hello {message_id}",
        "timestamp": "2025-11-20T10:00:00.000000+00:00",
        "author": {
            "id": "42",
            "username": "someone",
            "global_name": None,
            "avatar": "abc",
            "discriminator": "0",
            "public_flags": 0,
        },
    }
    message.update(extra)
    return message


class AvatarResolutionTests(unittest.TestCase):
    def test_guild_avatar_wins(self):
        url = resolve_avatar_url(GUILD_ID, _member(member_avatar="g1", user_avatar="u1"))
        self.assertEqual(
            url,
            "https://cdn.discordapp.com/guilds/1336782145833668729/users/"
            "433262414759198720/avatars/g1.png?size=256",
        )

    def test_global_avatar_when_no_guild_avatar(self):
        url = resolve_avatar_url(GUILD_ID, _member(user_avatar="u1"))
        self.assertEqual(
            url,
            "https://cdn.discordapp.com/avatars/433262414759198720/u1.png?size=256",
        )

    def test_default_avatar_for_new_style_user(self):
        url = resolve_avatar_url(GUILD_ID, _member(discriminator="0"))
        self.assertEqual(url, "https://cdn.discordapp.com/embed/avatars/5.png")

    def test_default_avatar_for_legacy_discriminator(self):
        url = resolve_avatar_url(GUILD_ID, _member(discriminator="1337"))
        self.assertEqual(url, "https://cdn.discordapp.com/embed/avatars/2.png")

    def test_default_index_uses_snowflake_for_zero_discriminator(self):
        self.assertEqual(default_avatar_index("1336782145833668729", "0"), 0)
        self.assertEqual(default_avatar_index("433262414759198720", "0"), 5)
        for user_id in ("1", "4194304", "80351110224678912", "1336782145833668729"):
            self.assertEqual(
                default_avatar_index(user_id, "0"), (int(user_id) >> 22) % 6
            )

    def test_default_index_uses_discriminator_modulo_five(self):
        self.assertEqual(default_avatar_index("123", "0001"), 1)
        self.assertEqual(default_avatar_index("123", "9999"), 4)
        self.assertEqual(default_avatar_index("123", "0005"), 0)

    def test_default_index_parses_leading_digits_only(self):
        self.assertEqual(default_avatar_index("123", "12abc"), 2)
        self.assertEqual(default_avatar_index("123", "abc"), 0)
        self.assertEqual(default_avatar_index("123", None), 0)

    def test_default_index_tolerates_bad_snowflake(self):
        self.assertEqual(default_avatar_index(None, "0"), 0)
        self.assertEqual(default_avatar_index("abc", "0"), 0)
        self.assertEqual(default_avatar_index("", "0"), 0)
        self.assertEqual(default_avatar_index(433262414759198720, "0"), 5)

    def test_default_avatar_without_user_id(self):
        self.assertEqual(
            resolve_avatar_url(GUILD_ID, {"user": {"discriminator": "0"}}),
            "https://cdn.discordapp.com/embed/avatars/0.png",
        )
        self.assertEqual(
            resolve_avatar_url(GUILD_ID, {}),
            "https://cdn.discordapp.com/embed/avatars/0.png",
        )

    def test_normalize_owner_shape(self):
        member = _member(user_avatar="u1")
        snapshot = copy.deepcopy(member)
        owner = normalize_owner(GUILD_ID, member)
        self.assertEqual(
            owner,
            {
                "id": "433262414759198720",
                "username": "urnisa",
                "global_name": "Urnisa",
                "discriminator": "0",
                "nick": "Boss",
                "avatar_url": "https://cdn.discordapp.com/avatars/433262414759198720/u1.png?size=256",
                "status": "offline",
            },
        )
        self.assertEqual(member, snapshot)


class MessageNormalizationTests(unittest.TestCase):
    def test_optional_arrays_default_to_empty(self):
        normalized = normalize_message(_message("1"))
        self.assertEqual(normalized["attachments"], [])
        self.assertEqual(normalized["sticker_items"], [])
        self.assertEqual(normalized["mentions"], [])
        self.assertEqual(normalized["reactions"], [])
        self.assertIsNone(normalized["member"])
        self.assertIsNone(normalized["referenced_message"])

    def test_field_set_and_projection(self):
        message = _message(
            "1",
            member={"nick": "Nick", "avatar": None, "roles": ["1"]},
            attachments=[{"id": "a", "url": "https://x/a.png"}],
            sticker_items=[{"id": "s", "name": "wave", "format_type": 1}],
            mentions=[{"id": "7", "username": "other"}],
            reactions=[
                {"emoji": {"id": None, "name": "🔥"}, "count": 3, "me": True, "burst_colors": []}
            ],
        )
        normalized = normalize_message(message)
        self.assertEqual(
            set(normalized),
            {
                "id",
                "content",
                "timestamp",
                "author",
                "member",
                "attachments",
                "sticker_items",
                "mentions",
                "reactions",
                "referenced_message",
            },
        )
        self.assertEqual(
            normalized["author"],
            {
                "id": "42",
                "username": "someone",
                "global_name": None,
                "avatar": "abc",
                "discriminator": "0",
            },
        )
        self.assertEqual(normalized["member"], {"nick": "Nick", "avatar": None})
        self.assertEqual(
            normalized["reactions"],
            [{"emoji": {"id": None, "name": "🔥"}, "count": 3, "me": True}],
        )
        self.assertEqual(normalized["attachments"], message["attachments"])

    def test_reply_is_projected_one_level(self):
        nested = _message("0")
        reply_target = _message(
            "1", mentions=[{"id": "9"}], referenced_message=nested
        )
        normalized = normalize_message(_message("2", referenced_message=reply_target))
        reference = normalized["referenced_message"]
        self.assertEqual(set(reference), {"id", "author", "content", "mentions"})
        self.assertEqual(reference["id"], "1")
        self.assertEqual(reference["content"], "hello 1")
        self.assertEqual(reference["mentions"], [{"id": "9"}])
        self.assertNotIn("referenced_message", reference)

    def test_deleted_reply_stays_null(self):
        normalized = normalize_message(_message("2", referenced_message=None))
        self.assertIsNone(normalized["referenced_message"])

    def test_output_is_oldest_first(self):
        upstream = [_message("3"), _message("2"), _message("1")]
        normalized = normalize_messages(upstream)
        self.assertEqual([m["id"] for m in normalized], ["1", "2", "3"])
        self.assertEqual(len(normalized), len(upstream))
        self.assertEqual(
            [m["id"] for m in reversed(normalized)], [m["id"] for m in upstream]
        )

    def test_upstream_is_not_mutated(self):
        upstream = [
            _message("2", reactions=[{"emoji": {"name": "x"}, "count": 1, "me": False}]),
            _message("1", attachments=[{"id": "a"}]),
        ]
        snapshot = copy.deepcopy(upstream)
        normalized = normalize_messages(upstream)
        normalized[0]["attachments"].append({"id": "b"})
        self.assertEqual(upstream, snapshot)

    def test_empty_page(self):
        self.assertEqual(normalize_messages([]), [])


if __name__ == "__main__":
    unittest.main()
