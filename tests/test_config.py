from pathlib import Path

import pytest

from ucloudctl.config import (
    Profile,
    _deep_merge,
    config_dir,
    load_config,
    load_profile,
)
from ucloudctl.core.exceptions import ConfigurationError

pytestmark = [pytest.mark.unit]


def _write(directory: Path, *, config: str = "", credential: str = "") -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    if config:
        (directory / "config.toml").write_text(config)
    if credential:
        (directory / "credential.toml").write_text(credential)
    return directory


class TestDeepMerge:
    def test_shallow_override(self):
        base = {"a": 1, "b": 2}
        override = {"b": 3}
        assert _deep_merge(base, override) == {"a": 1, "b": 3}

    def test_nested_merge(self):
        base = {"profiles": {"default": {"region": "cn-bj2", "zone": "cn-bj2-05"}}}
        override = {"profiles": {"default": {"public_key": "pk"}}}
        result = _deep_merge(base, override)
        assert result == {
            "profiles": {"default": {"region": "cn-bj2", "zone": "cn-bj2-05", "public_key": "pk"}}
        }

    def test_override_adds_new_keys(self):
        base = {"profiles": {"a": {"region": "hk"}}}
        override = {"profiles": {"b": {"region": "sg"}}}
        result = _deep_merge(base, override)
        assert result == {"profiles": {"a": {"region": "hk"}, "b": {"region": "sg"}}}

    def test_empty_base(self):
        assert _deep_merge({}, {"a": 1}) == {"a": 1}

    def test_empty_override(self):
        assert _deep_merge({"a": 1}, {}) == {"a": 1}

    def test_inputs_untouched(self):
        base = {"profiles": {"a": {"region": "hk"}}}
        _deep_merge(base, {"profiles": {"a": {"region": "sg"}}})
        assert base == {"profiles": {"a": {"region": "hk"}}}


class TestLoadConfig:
    def test_config_and_credentials_merged(self, tmp_path: Path):
        _write(
            tmp_path,
            config='[profiles.default]\nregion = "hk"\n',
            credential='[profiles.default]\npublic_key = "pk"\nprivate_key = "sk"\n',
        )
        result = load_config(tmp_path)
        assert result["profiles"]["default"] == {
            "region": "hk",
            "public_key": "pk",
            "private_key": "sk",
        }

    def test_no_files_returns_empty_profiles(self, tmp_path: Path):
        assert load_config(tmp_path / "missing") == {"profiles": {}}

    def test_invalid_toml(self, tmp_path: Path):
        _write(tmp_path, config="[profiles.default\nregion = ")
        with pytest.raises(ConfigurationError, match="Invalid config file"):
            load_config(tmp_path)

    def test_uses_env_directory(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        _write(tmp_path, config='active = "prod"\n')
        monkeypatch.setenv("UCLOUD_CONFIG_DIR", str(tmp_path))
        assert load_config()["active"] == "prod"


class TestConfigDir:
    def test_explicit_path_wins(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("UCLOUD_CONFIG_DIR", str(tmp_path / "env"))
        assert config_dir(tmp_path / "explicit") == tmp_path / "explicit"

    def test_env_directory(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("UCLOUD_CONFIG_DIR", str(tmp_path / "env"))
        assert config_dir() == tmp_path / "env"

    def test_home_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("UCLOUD_CONFIG_DIR")
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))
        assert config_dir() == tmp_path / ".ucloud"

    def test_create(self, tmp_path: Path):
        target = tmp_path / "nested" / "ucloud"
        assert config_dir(target, create=True) == target
        assert target.is_dir()


class TestLoadProfile:
    def test_defaults_without_files(self, tmp_path: Path):
        profile = load_profile(directory=tmp_path)
        assert profile == Profile()

    def test_default_profile(self, tmp_path: Path):
        _write(
            tmp_path,
            config='[profiles.default]\nregion = "hk"\nzone = "hk-02"\nproject_id = "org-1"\n',
            credential='[profiles.default]\npublic_key = "pk"\nprivate_key = "sk"\n',
        )
        profile = load_profile(directory=tmp_path)
        assert profile.name == "default"
        assert profile.region == "hk"
        assert profile.zone == "hk-02"
        assert profile.project_id == "org-1"
        assert profile.public_key == "pk"
        assert profile.private_key == "sk"

    def test_active_profile(self, tmp_path: Path):
        _write(
            tmp_path,
            config='active = "prod"\n[profiles.prod]\nregion = "sg"\n[profiles.default]\nregion = "hk"\n',
        )
        profile = load_profile(directory=tmp_path)
        assert profile.name == "prod"
        assert profile.region == "sg"

    def test_named_profile_beats_active(self, tmp_path: Path):
        _write(
            tmp_path,
            config='active = "prod"\n[profiles.prod]\nregion = "sg"\n[profiles.dev]\nregion = "hk"\n',
        )
        assert load_profile("dev", directory=tmp_path).region == "hk"

    def test_profile_from_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        _write(tmp_path, config='[profiles.dev]\nregion = "hk"\n')
        monkeypatch.setenv("UCLOUD_PROFILE", "dev")
        assert load_profile(directory=tmp_path).name == "dev"

    def test_unknown_profile_raises(self, tmp_path: Path):
        _write(tmp_path, config='[profiles.default]\nregion = "hk"\n')
        with pytest.raises(ConfigurationError, match="Profile 'nope' not found. Available: default"):
            load_profile("nope", directory=tmp_path)

    def test_env_overrides_files(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        _write(
            tmp_path,
            config='[profiles.default]\nregion = "hk"\n',
            credential='[profiles.default]\npublic_key = "pk"\nprivate_key = "sk"\n',
        )
        monkeypatch.setenv("UCLOUD_REGION", "cn-sh2")
        monkeypatch.setenv("UCLOUD_PUBLIC_KEY", "env-pk")
        monkeypatch.setenv("UCLOUD_BASE_URL", "http://localhost:8080")

        profile = load_profile(directory=tmp_path)
        assert profile.region == "cn-sh2"
        assert profile.public_key == "env-pk"
        assert profile.private_key == "sk"
        assert profile.base_url == "http://localhost:8080"

    def test_numeric_fields_coerced(self, tmp_path: Path):
        _write(tmp_path, config='[profiles.default]\ntimeout = 30\nmax_retries = "5"\n')
        profile = load_profile(directory=tmp_path)
        assert profile.timeout == 30.0
        assert isinstance(profile.timeout, float)
        assert profile.max_retries == 5

    @pytest.mark.parametrize(
        "line", ['timeout = "fast"', 'max_retries = "three"', 'max_retries = "1.5"']
    )
    def test_invalid_numeric_value(self, tmp_path: Path, line: str):
        _write(tmp_path, config=f"[profiles.default]\n{line}\n")
        with pytest.raises(ConfigurationError, match="Invalid .* in profile 'default'"):
            load_profile(directory=tmp_path)

    def test_unknown_keys_ignored(self, tmp_path: Path):
        _write(tmp_path, config='[profiles.default]\nregion = "hk"\ncolor = "blue"\n')
        assert load_profile(directory=tmp_path).region == "hk"


class TestRequireCredentials:
    def test_complete(self):
        profile = Profile(public_key="pk", private_key="sk")
        assert profile.require_credentials() is profile

    @pytest.mark.parametrize(("public", "private"), [("", "sk"), ("pk", ""), ("", "")])
    def test_missing(self, public: str, private: str):
        with pytest.raises(ConfigurationError, match="has no credentials"):
            Profile(public_key=public, private_key=private).require_credentials()
