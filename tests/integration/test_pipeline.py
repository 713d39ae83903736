"""
Integration tests for the full pipeline.

The external tools (configure, make, bindgen, cc, ar) are replaced by small
shell scripts so the real process runner, staging copy and directive
output are exercised end to end.
"""

import stat

import pytest

from avbuild.cli import run
from avbuild.config.layout import STATIC_LIBS

pytestmark = pytest.mark.integration

FAKE_CONFIGURE = """#!/bin/sh
asm_disabled=""
for arg in "$@"; do
  if [ "$arg" = "--disable-x86asm" ]; then asm_disabled=1; fi
done
if [ -n "$FAKE_MISSING_ASSEMBLER" ] && [ -z "$asm_disabled" ]; then
  echo "nasm/yasm not found or too old. Use --disable-x86asm for a crippled build."
  exit 1
fi
echo "$@" > config.flags
"""

FAKE_MAKE = """#!/bin/sh
while [ $# -gt 0 ]; do
  case "$1" in -C) root="$2"; shift;; esac
  shift
done
for rel in {libs}; do
  mkdir -p "$root/$(dirname "$rel")"
  printf '!<arch>\\n' > "$root/$rel"
done
"""

FAKE_CC = """#!/bin/sh
while [ $# -gt 0 ]; do
  case "$1" in -o) out="$2"; shift;; esac
  shift
done
printf 'obj\\n' > "$out"
"""

FAKE_AR = """#!/bin/sh
printf '!<arch>\\n' > "$2"
"""

FAKE_BINDGEN = """#!/bin/sh
{ echo "/* bindings */"; cat "$1"; } > "$3"
"""


def write_script(path, content):
    path.write_text(content)
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest.fixture
def project_dir(tmp_path):
    project = tmp_path / "project"
    source = project / "ffmpeg-src"
    (source / "libavutil").mkdir(parents=True)
    (source / "libavcodec").mkdir()
    write_script(source / "configure", FAKE_CONFIGURE)
    (source / "libavutil" / "avutil.h").write_text("int av_version(void);\n")
    (source / "libavcodec" / "avcodec.h").write_text("int avcodec_version(void);\n")
    (project / "headers").write_text("libavutil/avutil.h\nlibavcodec/avcodec.h\n")
    (project / "cbits").mkdir()
    (project / "cbits" / "defs.c").write_text("int defs;\n")
    (project / "cbits" / "img_utils.c").write_text("int img;\n")
    return project


@pytest.fixture
def environ(tmp_path):
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    libs = " ".join(rel_path for _, rel_path in STATIC_LIBS)
    return {
        "OUT_DIR": str(tmp_path / "out"),
        "PATH": "/usr/bin:/bin",
        "PROFILE": "debug",
        "OPT_LEVEL": "0",
        "MAKE": str(write_script(bin_dir / "fake-make", FAKE_MAKE.replace("{libs}", libs))),
        "CC": str(write_script(bin_dir / "fake-cc", FAKE_CC)),
        "AR": str(write_script(bin_dir / "fake-ar", FAKE_AR)),
        "BINDGEN": str(write_script(bin_dir / "fake-bindgen", FAKE_BINDGEN)),
    }


def test_build_is_idempotent(environ, project_dir, tmp_path, capsys):
    out_dir = (tmp_path / "out").resolve()
    bindings = out_dir / "bindings_ffmpeg.rs"

    assert run(environ, project_dir) == 0
    first_directives = capsys.readouterr().out.splitlines()
    first_bindings = bindings.read_bytes()

    assert run(dict(environ, FFDEV2="2"), project_dir) == 0
    second_directives = capsys.readouterr().out.splitlines()

    assert bindings.read_bytes() == first_bindings
    assert second_directives == first_directives
    assert first_directives[-2:] == [
        f"cargo:rustc-link-search=native={out_dir}",
        "cargo:rustc-link-lib=static=cbits",
    ]
    for _, rel_path in STATIC_LIBS:
        assert (out_dir / "ffmpeg-src" / rel_path).exists()
    assert (out_dir / "libcbits.a").exists()


def test_cached_debug_build_skips_configure(environ, project_dir, tmp_path, capsys):
    flags_file = (tmp_path / "out").resolve() / "ffmpeg-src" / "config.flags"

    assert run(environ, project_dir) == 0
    flags_file.unlink()

    assert run(environ, project_dir) == 0
    assert not flags_file.exists()


def test_debug_flags_reach_configure(environ, project_dir, tmp_path):
    assert run(dict(environ, CARGO_FEATURE_GPL=""), project_dir) == 0

    flags = ((tmp_path / "out").resolve() / "ffmpeg-src" / "config.flags").read_text().split()
    assert flags[:3] == ["--disable-programs", "--disable-doc", "--disable-autodetect"]
    assert "--enable-gpl" in flags
    assert "--enable-debug" in flags


def test_missing_assembler_is_retried(environ, project_dir, tmp_path):
    assert run(dict(environ, FAKE_MISSING_ASSEMBLER="1"), project_dir) == 0

    flags = ((tmp_path / "out").resolve() / "ffmpeg-src" / "config.flags").read_text().split()
    assert flags[-1] == "--disable-x86asm"


def test_make_failure_reports_output(environ, project_dir, capsys):
    environ["MAKE"] = "/bin/false"

    assert run(environ, project_dir) == 1

    captured = capsys.readouterr()
    assert "make -C" in captured.err
    assert "cargo:rustc-link-lib" not in captured.out


def test_missing_header_reports_path(environ, project_dir, capsys):
    (project_dir / "headers").write_text("libavutil/avutil.h\nutil/common.h\n")

    assert run(environ, project_dir) == 1

    captured = capsys.readouterr()
    assert "util/common.h" in captured.err
    assert "missing headers (1)" in captured.err
