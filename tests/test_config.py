"""Tests for plugin config defaults, validation and version migration."""

import json

import pytest

from dancing_npc.config import PluginConfig, parse_version


def write(path, data):
    path.write_text(json.dumps(data))


def read(path):
    return json.loads(path.read_text())


class TestParseVersion:

    @pytest.mark.parametrize("value, expected", [
        ("1.2.0", (1, 2, 0)),
        ("1.3", (1, 3, 0)),
        ("2", (2, 0, 0)),
        ("1.x", (0, 0, 0)),
        (None, (0, 0, 0)),
        (13, (0, 0, 0)),
    ])
    def test_parse(self, value, expected):
        assert parse_version(value) == expected

    def test_numeric_ordering(self):
        assert parse_version("1.10.0") > parse_version("1.9.0")


class TestPluginConfig:

    def test_missing_file_written_with_defaults(self, tmp_path):
        path = tmp_path / "config" / "DancingNPC.json"
        config = PluginConfig(str(path))

        assert path.exists()
        assert read(path)["Version"] == "1.3.0"
        assert config.chat_command == "dance"
        assert config.gestures == ["shrug", "victory", "wave", "cabbagepatch"]
        assert config.gear_sets == ["hazmat suit", "egg suit"]
        assert config.max_npcs_per_player == 3
        assert config.line_of_sight_distance == 10.0

    def test_current_file_is_left_alone(self, tmp_path):
        path = tmp_path / "DancingNPC.json"
        write(path, {"Version": "1.3.0", "Chat Command": "party", "Gestures": ["wave"], "Gear Sets": [],
                     "Maximum NPCs Per Player": 1, "Line Of Sight Distance": 4})

        config = PluginConfig(str(path))
        assert config.chat_command == "party"
        assert config.gestures == ["wave"]
        assert config.gear_sets == []
        assert config.max_npcs_per_player == 1
        assert config.line_of_sight_distance == 4.0

    def test_from_1_0_adds_gear_sets_and_limits(self, tmp_path):
        path = tmp_path / "DancingNPC.json"
        write(path, {"Version": "1.0.0", "Chat Command": "party", "Gestures": ["wave"]})

        config = PluginConfig(str(path))
        saved = read(path)
        assert saved["Version"] == "1.3.0"
        assert saved["Chat Command"] == "party"
        assert saved["Gestures"] == ["wave"]
        assert saved["Gear Sets"] == ["hazmat suit", "egg suit"]
        assert saved["Maximum NPCs Per Player"] == 3
        assert saved["Line Of Sight Distance"] == 10.0
        assert config.chat_command == "party"

    def test_from_1_2_keeps_gear_sets(self, tmp_path):
        path = tmp_path / "DancingNPC.json"
        write(path, {"Version": "1.2.0", "Chat Command": "dance", "Gestures": ["wave"], "Gear Sets": ["tuxedo"],
                     "Maximum NPCs Per Player": 9})

        PluginConfig(str(path))
        saved = read(path)
        assert saved["Gear Sets"] == ["tuxedo"]
        assert saved["Maximum NPCs Per Player"] == 3
        assert saved["Version"] == "1.3.0"

    def test_pre_release_is_reset(self, tmp_path):
        path = tmp_path / "DancingNPC.json"
        write(path, {"Version": "0.9.0", "Chat Command": "party", "Gestures": ["wave"]})

        config = PluginConfig(str(path))
        assert config.chat_command == "dance"
        assert config.gestures == ["shrug", "victory", "wave", "cabbagepatch"]

    def test_missing_version_is_reset(self, tmp_path):
        path = tmp_path / "DancingNPC.json"
        write(path, {"Chat Command": "party"})

        assert PluginConfig(str(path)).chat_command == "dance"
        assert read(path)["Version"] == "1.3.0"

    def test_corrupt_file_uses_defaults(self, tmp_path):
        path = tmp_path / "DancingNPC.json"
        path.write_text("{broken")

        config = PluginConfig(str(path))
        assert config.chat_command == "dance"
        assert path.read_text() == "{broken"

    def test_invalid_values_fall_back(self, tmp_path):
        path = tmp_path / "DancingNPC.json"
        write(path, {"Version": "1.3.0", "Chat Command": "  ", "Gestures": "wave", "Gear Sets": ["ok", 5, ""],
                     "Maximum NPCs Per Player": -1, "Line Of Sight Distance": True})

        config = PluginConfig(str(path))
        assert config.chat_command == "dance"
        assert config.gestures == []
        assert config.gear_sets == ["ok"]
        assert config.max_npcs_per_player == 3
        assert config.line_of_sight_distance == 10.0

    def test_chat_command_normalized(self, tmp_path):
        path = tmp_path / "DancingNPC.json"
        write(path, {"Version": "1.3.0", "Chat Command": "/Party"})
        assert PluginConfig(str(path)).chat_command == "party"
