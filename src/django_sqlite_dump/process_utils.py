from __future__ import annotations

import subprocess


def finish_process(proc: subprocess.Popen[bytes]) -> tuple[bytes, bytes]:
    """Wait for process completion and return ``(stdout, stderr)`` bytes safely."""
    stdout, stderr = proc.communicate()
    return stdout or b"", stderr or b""


def decode_output(*chunks: bytes) -> str:
    """Join captured process output into one diagnostic string."""
    return "\n".join(chunk.decode(errors="replace").strip() for chunk in chunks if chunk and chunk.strip())
