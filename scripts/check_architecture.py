#!/usr/bin/env python3
"""Architecture enforcement checks for newsframes.

This script runs as part of CI/pre-commit to catch architectural violations.
Exit code 0 = all checks passed, non-zero = violations found.

Violations:
1. Direct LLM provider imports in cortex/ (must use model_registry)
2. Hardcoded provider checks like `config.gemini.api_key` (provider-agnostic)
3. Graph-level code reaching into the transport layer (service/cli)
"""

import subprocess
import sys
from pathlib import Path

# Where to check
CORTEX = "src/newsframes/cortex"

# Patterns that violate architecture
VIOLATIONS = [
    {
        "name": "Direct LLM provider import",
        "pattern": r"from newsframes\.modules\.models\.llm\.(gemini|openai)",
        "message": "Use `from newsframes.modules.models import model_registry` instead",
        "exclude": [],
    },
    {
        "name": "Hardcoded provider API key check",
        "pattern": r"config\.(gemini|openai)\.api_key",
        "message": "Steps are provider-agnostic. The generation client resolves providers.",
        "exclude": [],
    },
    {
        "name": "Direct model instantiation",
        "pattern": r"(GeminiLLM|OpenAICompatLLM)\s*\(",
        "message": "Use `GenerationClient.provider()` or `model_registry.get_llm()`.",
        "exclude": [],
    },
    {
        "name": "Cortex importing the transport layer",
        "pattern": r"from newsframes\.(service|cli)",
        "message": "The engine must not depend on request handling or the CLI.",
        "exclude": [],
    },
]


def run_grep(pattern: str, path: str, exclude: list[str]) -> list[str]:
    """Run ripgrep and return matching files with line numbers."""
    cmd = ["rg", "--no-heading", "--line-number", "--color=never", pattern, path]

    try:
        result = subprocess.run(cmd, capture_output=True, text=True, check=False)
    except FileNotFoundError:
        # ripgrep not available, try grep
        cmd = ["grep", "-rn", "-E", pattern, path]
        result = subprocess.run(cmd, capture_output=True, text=True, check=False)

    if result.returncode != 0:
        return []
    lines = result.stdout.strip().split("\n")
    return [line for line in lines if not any(exc in line for exc in exclude)]


def main() -> int:
    """Run all architecture checks."""
    project_root = Path(__file__).parent.parent
    check_path = project_root / CORTEX

    if not check_path.exists():
        print(f"Path not found: {check_path}")
        return 1

    violations_found = 0

    print("Running architecture enforcement checks...")
    print(f"   Checking: {check_path}\n")

    for check in VIOLATIONS:
        matches = run_grep(check["pattern"], str(check_path), check.get("exclude", []))

        if matches:
            violations_found += len(matches)
            print(f"FAIL {check['name']}")
            print(f"   -> {check['message']}")
            print()
            for match in matches:
                print(f"   {match}")
            print()

    if violations_found == 0:
        print("All architecture checks passed!")
        return 0
    print(f"\nFound {violations_found} violation(s). Please fix before committing.")
    return 1


if __name__ == "__main__":
    sys.exit(main())
