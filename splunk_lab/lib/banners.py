from __future__ import annotations

_RULE = "=" * 40


def _instructions(script_name: str) -> list[str]:
    return [
        "    cd ~",
        f"    sudo ./{script_name}",
    ]


def render_prelogin(user: str, password: str, script_name: str) -> str:
    """Banner shown before authentication (console /etc/issue and SSH)."""

    return "\n".join(
        [
            _RULE,
            "  CYBER LAB VM",
            "",
            f"  Username: {user}",
            f"  Password: {password}",
            "",
            "  After login:",
            *_instructions(script_name),
            _RULE,
            "",
            "",
        ]
    )


def render_postlogin(script_name: str) -> str:
    return "\n".join(
        [
            _RULE,
            "  LAB INSTRUCTIONS",
            "",
            "  Run:",
            *_instructions(script_name),
            _RULE,
            "",
        ]
    )


def render_profile_snippet(script_name: str) -> str:
    """/etc/profile.d script that repeats the instructions in interactive shells only."""

    return "\n".join(
        [
            "#!/usr/bin/env bash",
            'if [[ -n "${PS1-}" ]]; then',
            "cat <<'BANNER'",
            render_postlogin(script_name).rstrip("\n"),
            "BANNER",
            "fi",
            "",
        ]
    )
