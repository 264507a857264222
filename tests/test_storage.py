"""Tests for the host services plugins lean on: data files, permissions, lang and chat parsing."""

import pytest

from server_engine.commands.chat import ChatCommandRegistry
from server_engine.plugins.plugin import Plugin


class _Owner(Plugin):
    name = "Owner"


class TestDataFiles:

    def test_missing_key_returns_default(self, server):
        assert server.data_files.read_object("Nothing") is None
        assert server.data_files.read_object("Nothing", {}) == {}

    def test_write_then_read(self, server):
        server.data_files.write_object("Doc", {"a": [1, 2, 3]})
        assert server.data_files.exists("Doc")
        assert server.data_files.read_object("Doc") == {"a": [1, 2, 3]}

        server.data_files.write_object("Doc", {"a": []})
        assert server.data_files.read_object("Doc") == {"a": []}

    def test_delete(self, server):
        server.data_files.write_object("Doc", [1])
        assert server.data_files.delete("Doc")
        assert not server.data_files.exists("Doc")
        assert not server.data_files.delete("Doc")

    def test_corrupt_payload_reads_as_default(self, server):
        server.queries.put_data_file("Broken", "{not json")
        assert server.data_files.read_object("Broken", "fallback") == "fallback"

    def test_failed_transaction_rolls_back(self, server):
        with pytest.raises(RuntimeError):
            with server.db.transaction():
                server.db.execute(
                    "INSERT INTO data_files (file_key, payload_json, updated_at) VALUES (?, ?, ?)",
                    ("Partial", "[]", 0)
                )
                raise RuntimeError("abort")

        assert not server.data_files.exists("Partial")


class TestPermissions:

    def test_unknown_permission_cannot_be_granted(self, server):
        assert not server.permissions.grant_user_permission("1", "nope.use")
        assert not server.permissions.user_has_permission("1", "nope.use")

    def test_grant_and_revoke(self, server):
        owner = _Owner()
        server.permissions.register_permission("owner.use", owner)

        assert server.permissions.grant_user_permission("7", "owner.use")
        assert server.permissions.user_has_permission("7", "OWNER.USE")
        assert not server.permissions.user_has_permission("8", "owner.use")

        server.permissions.revoke_user_permission("7", "owner.use")
        assert not server.permissions.user_has_permission("7", "owner.use")

    def test_unregister_owner(self, server):
        owner = _Owner()
        server.permissions.register_permission("owner.use", owner)
        server.permissions.unregister_owner(owner)
        assert not server.permissions.permission_exists("owner.use")


class TestLang:

    def test_falls_back_to_english_then_key(self, server):
        owner = _Owner()
        server.lang.register_messages({"Hello": "Hello {0}"}, owner)
        server.lang.register_messages({"Hello": "Hallo {0}"}, owner, "de")

        server.lang.set_language("5", "de")
        assert server.lang.get_message("Hello", owner, "5") == "Hallo {0}"
        assert server.lang.get_message("Hello", owner, "6") == "Hello {0}"
        assert server.lang.get_message("Missing", owner, "6") == "Missing"

    def test_registration_keeps_existing_text(self, server):
        owner = _Owner()
        server.lang.register_messages({"Hello": "Custom"}, owner)
        server.lang.register_messages({"Hello": "Default"}, owner)
        assert server.lang.get_message("Hello", owner) == "Custom"


class TestChatParsing:

    def test_quoted_arguments(self):
        assert ChatCommandRegistry.parse('/Dance add wave "hazmat suit"') == ("dance", ["add", "wave", "hazmat suit"])

    def test_not_a_command(self):
        assert ChatCommandRegistry.parse("hello there") == (None, [])
        assert ChatCommandRegistry.parse("/") == (None, [])

    def test_unbalanced_quotes_fall_back_to_split(self):
        assert ChatCommandRegistry.parse('/dance add "wave') == ("dance", ["add", '"wave'])

    def test_command_owned_by_other_plugin_is_refused(self):
        registry = ChatCommandRegistry()
        first, second = _Owner(), _Owner()
        assert registry.add_chat_command("dance", first, lambda *a: None)
        assert not registry.add_chat_command("dance", second, lambda *a: None)
        assert registry.remove_plugin_commands(first) == 1
        assert registry.get("dance") is None

    def test_failing_handler_is_contained(self, server, make_player):
        player = make_player(1, allowed=False)

        def boom(player, command, args):
            raise RuntimeError("boom")

        server.commands.add_chat_command("boom", _Owner(), boom)
        assert server.handle_chat(player, "/boom")

    def test_remove_chat_command(self):
        registry = ChatCommandRegistry()
        registry.add_chat_command("Dance", _Owner(), lambda *a: None)
        assert registry.remove_chat_command("DANCE")
        assert not registry.remove_chat_command("dance")


class TestPlayers:

    def test_find_connected_player(self, server, make_player):
        player = make_player(7, allowed=False)
        assert server.find_player(7) is player
        assert server.find_player(8) is None

        server.world.destroy_entity(player)
        assert server.find_player(7) is None
