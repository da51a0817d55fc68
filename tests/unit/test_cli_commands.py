"""Tests for the argparse command modules: output lines and exit codes."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from cli.commands import inspect as inspect_cmd
from cli.commands import unpack as unpack_cmd
from cli.commands import verify as verify_cmd
from cli.commands import verify_batch as verify_batch_cmd
from xartool.verifier import BatchVerifier


class TestVerifyCommand:
    def test_verified(self, sample_path: Path, capsys):
        verify_cmd.main([str(sample_path)])
        assert capsys.readouterr().out.strip() == "Archive verified"

    def test_failed_exits_nonzero(self, make_xar, entry, tmp_path: Path, capsys):
        path = make_xar([entry("a.txt", b"a", extracted="0" * 40)]).write(tmp_path / "bad.xar")
        with pytest.raises(SystemExit) as exc:
            verify_cmd.main([str(path)])
        assert exc.value.code == 1
        out = capsys.readouterr().out.strip()
        assert out.startswith("Archive verification failed: Extracted digest mismatch for a.txt.")

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(SystemExit) as exc:
            verify_cmd.main([str(tmp_path / "missing.xar")])
        assert exc.value.code == 1

    def test_unopenable_archive(self, tmp_path: Path, capsys):
        path = tmp_path / "short.xar"
        path.write_bytes(b"xar!\x00")
        with pytest.raises(SystemExit) as exc:
            verify_cmd.main([str(path)])
        assert exc.value.code == 1
        assert capsys.readouterr().out.startswith("Archive verification failed:")

    def test_strict_rejects_bad_header(self, make_xar, entry, tmp_path: Path, capsys):
        path = make_xar([entry("a", b"a")], checksum_algorithm=2).write(tmp_path / "md5.xar")
        verify_cmd.main([str(path)])
        assert capsys.readouterr().out.strip() == "Archive verified"
        with pytest.raises(SystemExit):
            verify_cmd.main(["--strict", str(path)])


class TestOtherCommands:
    def test_inspect_json(self, sample_path: Path, capsys):
        inspect_cmd.main(["--json", str(sample_path)])
        info = json.loads(capsys.readouterr().out)
        assert info["file_count"] == 4

    def test_unpack(self, sample_path: Path, tmp_path: Path):
        out = tmp_path / "restored"
        unpack_cmd.main([str(sample_path), "-o", str(out)])
        assert (out / "docs" / "a.txt").read_bytes() == b"alpha"

    def test_unpack_refuses_non_empty_output(self, sample_path: Path, tmp_path: Path):
        out = tmp_path / "restored"
        out.mkdir()
        (out / "x").write_text("x")
        with pytest.raises(SystemExit) as exc:
            unpack_cmd.main([str(sample_path), "-o", str(out)])
        assert exc.value.code == 1

    def test_verify_batch(self, tmp_path: Path, make_xar, entry, capsys):
        make_xar([entry("a", b"a")]).write(tmp_path / "one.xar")
        make_xar([entry("b", b"b")]).write(tmp_path / "two.xar")
        verify_batch_cmd.main([str(tmp_path), "-w", "2"])
        lines = capsys.readouterr().out.strip().splitlines()
        assert sorted(lines) == [
            f"{tmp_path / 'one.xar'}: Archive verified",
            f"{tmp_path / 'two.xar'}: Archive verified",
        ]


class TestOversizedManifestValues:
    """u64 offsets and lengths beyond the file end must fail cleanly, not crash."""

    @pytest.mark.parametrize("data_xml", [
        f"<length>{2 ** 63}</length><offset>0</offset>",
        f"<length>4</length><offset>{2 ** 64 - 1}</offset>",
        f"<length>{10 ** 12}</length><offset>0</offset>",
    ])
    def test_huge_file_range(self, make_xar, tmp_path: Path, capsys, data_xml: str):
        xml = f"<name>huge</name><type>file</type><data>{data_xml}</data>"
        path = make_xar([{"raw_xml": xml}]).write(tmp_path / "huge.xar")
        with pytest.raises(SystemExit) as exc:
            verify_cmd.main([str(path)])
        assert exc.value.code == 1
        assert capsys.readouterr().out.startswith("Archive verification failed:")

    def test_huge_checksum_size(self, make_xar, tmp_path: Path, capsys):
        checksum = f"<checksum><offset>0</offset><size>{2 ** 63}</size></checksum>"
        path = make_xar([], checksum=False, extra_toc=checksum).write(tmp_path / "huge.xar")
        with pytest.raises(SystemExit) as exc:
            verify_cmd.main([str(path)])
        assert exc.value.code == 1
        assert "past end of archive" in capsys.readouterr().out

    def test_huge_range_is_a_batch_failure(self, make_xar, tmp_path: Path):
        xml = f"<name>huge</name><type>file</type><data><length>{2 ** 63}</length></data>"
        make_xar([{"raw_xml": xml}]).write(tmp_path / "huge.xar")
        make_xar([]).write(tmp_path / "fine.xar")
        summary = BatchVerifier(max_workers=1).verify_directory(str(tmp_path))
        assert summary["succeeded"] == 1
        assert summary["failed"] == 1
