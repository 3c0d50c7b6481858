import shlex
import sys
from pathlib import Path
from typing import Callable

import pytest


def _add_src_to_path() -> None:
    root = Path(__file__).resolve().parents[1]
    src_path = root / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


_add_src_to_path()


FakeCompiler = Callable[..., Path]


@pytest.fixture
def fake_compiler(tmp_path: Path) -> FakeCompiler:
    """Return a factory for stand-in ``go`` executables.

    The stand-in accepts ``build -o EXE SOURCE`` and writes ``EXE`` as a shell
    script running ``program``. With ``fail=True`` it prints a diagnostic and
    exits 1 without producing anything.
    """

    def _make(program: str = "exit 0", fail: bool = False) -> Path:
        compiler = tmp_path / "bin" / "fake-go"
        compiler.parent.mkdir(parents=True, exist_ok=True)
        if fail:
            script = "#!/bin/sh\necho 'fake-go: syntax error' >&2\nexit 1\n"
        else:
            script = (
                "#!/bin/sh\n"
                '[ "$1" = build ] || exit 2\n'
                "printf '%s\\n' '#!/bin/sh' " + shlex.quote(program) + ' > "$3"\n'
                'chmod +x "$3"\n'
            )
        compiler.write_text(script, encoding="utf-8")
        compiler.chmod(0o755)
        return compiler

    return _make
