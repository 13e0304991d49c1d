"""Tests for the seedkey command line and its configuration."""

import getpass
from pathlib import Path

import pytest

from seedkey import cli
from seedkey.config import Settings, default_comment
from seedkey.entropy import FixedRandom
from seedkey.errors import PassphraseRequired
from seedkey.keys import derive
from seedkey.mnemonic import parse, to_seed
from seedkey.openssh import decode_private_key

ABANDON = " ".join(["abandon"] * 11 + ["about"])
CHECKINT = b"\x01\x02\x03\x04"
ABANDON_PUBLIC = bytes.fromhex("c5785e1865b708938aff8161d573006496663b1aa10834e396dc566869a2c66a")
PUBLIC_LINE = "ssh-ed25519 AAAAC3NzaC1lZDI1NTE5AAAAIMV4XhhltwiTiv+BYdVzAGSWZjsaoQg045bcVmhposZq test\n"


def _settings(tmp_path, **overrides):
    settings = Settings(OUTPUT_DIR=tmp_path, COMMENT="test")
    for key, value in overrides.items():
        setattr(settings, key, value)
    return settings


class TestSettings:
    def test_defaults(self):
        settings = Settings.from_env({})
        assert settings.KEY_TYPE is None
        assert settings.WORDS == 12
        assert settings.NO_PASSPHRASE is False
        assert settings.PASSPHRASE == ""
        assert settings.KEY_PASSPHRASE == ""
        assert settings.OUTPUT_NAME == ""
        assert settings.OUTPUT_DIR.name == ".ssh" or settings.OUTPUT_DIR == Path()
        assert "@" in settings.COMMENT

    def test_from_env(self, tmp_path):
        settings = Settings.from_env({
            "KEY_TYPE": "ed25519",
            "WORDS": "24",
            "MNEMONIC": ABANDON,
            "NO_PASSPHRASE": "yes",
            "PASSPHRASE": "seed words",
            "KEY_PASSPHRASE": "file lock",
            "OUTPUT_DIR": str(tmp_path),
            "OUTPUT_NAME": "deploy",
            "COMMENT": "ci@build",
        })
        assert settings.KEY_TYPE == "ed25519"
        assert settings.WORDS == 24
        assert settings.MNEMONIC == ABANDON
        assert settings.NO_PASSPHRASE is True
        assert settings.PASSPHRASE == "seed words"
        assert settings.KEY_PASSPHRASE == "file lock"
        assert settings.OUTPUT_DIR == tmp_path
        assert settings.OUTPUT_NAME == "deploy"
        assert settings.COMMENT == "ci@build"

    def test_bad_words(self):
        with pytest.raises(ValueError):
            Settings.from_env({"WORDS": "many"})

    def test_default_comment(self):
        user, _, host = default_comment().partition("@")
        assert user and host


class TestSsh:
    def test_with_mnemonic(self, tmp_path, capsys):
        code = cli.main(
            ["ssh", "-t", "ed25519", "-N", "-m", ABANDON],
            settings=_settings(tmp_path),
            rng=FixedRandom(CHECKINT),
        )
        assert code == 0
        assert (tmp_path / "id_ed25519.pub").read_text() == PUBLIC_LINE
        keypair, comment = decode_private_key((tmp_path / "id_ed25519").read_text())
        assert comment == "test"
        out = capsys.readouterr().out
        assert "SHA256:6N1lEQj6Mk66zijGkeFd53q08RAlP8J1MHLODneVyjY test" in out
        assert "abandon" not in out

    def test_generates_and_prints_mnemonic(self, tmp_path, capsys):
        code = cli.main(
            ["ssh", "-t", "ed25519", "-N", "--yes", "-f", "gen"],
            settings=_settings(tmp_path),
            rng=FixedRandom(bytes(16) + CHECKINT),
        )
        assert code == 0
        out = capsys.readouterr().out
        assert "No mnemonic provided" in out
        assert ABANDON in out
        assert (tmp_path / "gen.pub").read_text() == PUBLIC_LINE

    def test_regenerate_loop(self, tmp_path, monkeypatch, capsys):
        answers = iter([True, False])
        monkeypatch.setattr(cli, "ask", lambda question, default=False: next(answers))
        rng = FixedRandom(b"\xff" * 16 + bytes(16) + CHECKINT)
        code = cli.main(["ssh", "-t", "ed25519", "-N"], settings=_settings(tmp_path), rng=rng)
        assert code == 0
        out = capsys.readouterr().out
        assert "zoo zoo" in out
        assert (tmp_path / "id_ed25519.pub").read_text() == PUBLIC_LINE

    def test_words_option(self, tmp_path, capsys):
        code = cli.main(
            ["ssh", "-t", "ed25519", "-N", "--yes", "-w", "24"],
            settings=_settings(tmp_path),
        )
        assert code == 0
        out = capsys.readouterr().out
        phrase = next(line for line in out.splitlines() if line.startswith("  "))
        assert len(phrase.split()) == 24

    def test_passphrase_option(self, tmp_path):
        code = cli.main(
            ["ssh", "-t", "ed25519", "-p", "pw", "-m", ABANDON],
            settings=_settings(tmp_path),
        )
        assert code == 0
        keypair, _ = decode_private_key((tmp_path / "id_ed25519").read_text())
        assert keypair.public_key != ABANDON_PUBLIC
        assert keypair == derive(to_seed(parse(ABANDON), "pw"))

    def test_passphrase_from_env(self, tmp_path):
        settings = _settings(tmp_path, KEY_TYPE="ed25519", MNEMONIC=ABANDON, PASSPHRASE="pw")
        assert cli.main(["ssh"], settings=settings) == 0
        keypair, _ = decode_private_key((tmp_path / "id_ed25519").read_text())
        assert keypair == derive(to_seed(parse(ABANDON), "pw"))

    def test_key_passphrase_encrypts_file(self, tmp_path):
        code = cli.main(
            ["ssh", "-t", "ed25519", "-N", "--key-passphrase", "lock", "-m", ABANDON],
            settings=_settings(tmp_path),
        )
        assert code == 0
        text = (tmp_path / "id_ed25519").read_text()
        with pytest.raises(PassphraseRequired):
            decode_private_key(text)
        keypair, _ = decode_private_key(text, "lock")
        assert keypair.public_key == ABANDON_PUBLIC

    def test_prompts_for_passphrase(self, tmp_path, monkeypatch):
        prompts = []

        def fake_getpass(prompt=""):
            prompts.append(prompt)
            return "typed"

        monkeypatch.setattr(getpass, "getpass", fake_getpass)
        code = cli.main(["ssh", "-t", "ed25519", "-m", ABANDON], settings=_settings(tmp_path))
        assert code == 0
        assert len(prompts) == 2
        keypair, _ = decode_private_key((tmp_path / "id_ed25519").read_text())
        assert keypair == derive(to_seed(parse(ABANDON), "typed"))

    def test_empty_prompt_is_empty_passphrase(self, tmp_path, monkeypatch):
        monkeypatch.setattr(getpass, "getpass", lambda prompt="": "")
        code = cli.main(["ssh", "-t", "ed25519", "-m", ABANDON], settings=_settings(tmp_path))
        assert code == 0
        keypair, _ = decode_private_key((tmp_path / "id_ed25519").read_text())
        assert keypair.public_key == ABANDON_PUBLIC

    def test_no_input_for_prompt(self, tmp_path, monkeypatch, capsys):
        def closed_stdin(prompt=""):
            raise EOFError

        monkeypatch.setattr(getpass, "getpass", closed_stdin)
        code = cli.main(["ssh", "-t", "ed25519", "-m", ABANDON], settings=_settings(tmp_path))
        assert code == 1
        assert "no input" in capsys.readouterr().err
        assert not (tmp_path / "id_ed25519").exists()

    def test_unwritable_output(self, tmp_path, capsys):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        code = cli.main(
            ["ssh", "-t", "ed25519", "-N", "-m", ABANDON, "-o", str(blocker)],
            settings=_settings(tmp_path),
        )
        assert code == 1
        assert capsys.readouterr().err.startswith("seedkey: ")
        assert blocker.read_text() == "not a directory"

    def test_passphrase_mismatch(self, tmp_path, monkeypatch, capsys):
        answers = iter(["one", "two"])
        monkeypatch.setattr(getpass, "getpass", lambda prompt="": next(answers))
        code = cli.main(["ssh", "-t", "ed25519", "-m", ABANDON], settings=_settings(tmp_path))
        assert code == 1
        assert "do not match" in capsys.readouterr().err
        assert not (tmp_path / "id_ed25519").exists()

    def test_key_type_from_settings(self, tmp_path):
        settings = _settings(tmp_path, KEY_TYPE="ed25519", NO_PASSPHRASE=True, MNEMONIC=ABANDON)
        assert cli.main(["ssh"], settings=settings) == 0
        assert (tmp_path / "id_ed25519.pub").exists()

    def test_key_type_required(self, tmp_path):
        with pytest.raises(SystemExit) as exc:
            cli.main(["ssh", "-N", "-m", ABANDON], settings=_settings(tmp_path))
        assert exc.value.code == 2

    def test_unsupported_key_type(self, tmp_path, capsys):
        code = cli.main(["ssh", "-t", "rsa", "-N", "-m", ABANDON], settings=_settings(tmp_path))
        assert code == 1
        assert "not supported" in capsys.readouterr().err

    def test_invalid_mnemonic(self, tmp_path, capsys):
        code = cli.main(
            ["ssh", "-t", "ed25519", "-N", "-m", "abandon " * 12],
            settings=_settings(tmp_path),
        )
        assert code == 1
        assert "checksum" in capsys.readouterr().err
        assert list(tmp_path.iterdir()) == []

    def test_overwrite_declined(self, tmp_path, monkeypatch, capsys):
        (tmp_path / "id_ed25519.pub").write_text("old")
        monkeypatch.setattr(cli, "ask", lambda question, default=False: False)
        code = cli.main(["ssh", "-t", "ed25519", "-N", "-m", ABANDON], settings=_settings(tmp_path))
        assert code == 1
        assert "already exists" in capsys.readouterr().err
        assert (tmp_path / "id_ed25519.pub").read_text() == "old"

    def test_overwrite_with_yes(self, tmp_path):
        (tmp_path / "id_ed25519.pub").write_text("old")
        code = cli.main(
            ["ssh", "-t", "ed25519", "-N", "-y", "-m", ABANDON],
            settings=_settings(tmp_path),
            rng=FixedRandom(CHECKINT),
        )
        assert code == 0
        assert (tmp_path / "id_ed25519.pub").read_text() == PUBLIC_LINE

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc:
            cli.main(["--version"], settings=Settings())
        assert exc.value.code == 0
        assert "seedkey" in capsys.readouterr().out


class TestAsk:
    def test_default(self, monkeypatch):
        monkeypatch.setattr("builtins.input", lambda prompt="": "")
        assert cli.ask("ok?") is False
        assert cli.ask("ok?", default=True) is True

    def test_yes(self, monkeypatch):
        monkeypatch.setattr("builtins.input", lambda prompt="": "Y")
        assert cli.ask("ok?") is True
