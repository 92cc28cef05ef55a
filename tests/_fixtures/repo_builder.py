"""Helper utilities for constructing temporary project trees in tests."""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Mapping, Sequence

from zendoc.models import DocPlan
from zendoc.planner import DocPlanner


class RepoBuilder:
    """Utility for writing files into a throwaway project and planning it."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "repo"
        self.root.mkdir()
        self._planner = DocPlanner()

    def write(self, files: Mapping[str, str]) -> None:
        """Write `path -> contents` entries into the project."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            normalised = textwrap.dedent(content).lstrip("\n")
            path.write_text(normalised, encoding="utf-8")

    def plan(self, include: Sequence[str] = ()) -> DocPlan:
        """Return a fresh documentation plan for the project contents."""
        return self._planner.plan(self.root, include=include)

    def path(self) -> Path:
        """Return the project root path."""
        return self.root


NEXT_APP = {
    "app/page.tsx": "export default function Home() { return <main/> }\n",
    "app/(marketing)/about/page.tsx": "export default function About() { return null }\n",
    "app/blog/[slug]/page.tsx": "export default function Post() { return null }\n",
    "app/api/users/route.ts": """
        export async function GET() { return Response.json([]) }
    """,
    "app/api/users/[id]/route.ts": """
        export async function DELETE() { return new Response(null) }
    """,
    "components/Button.tsx": "export function Button() { return <button/> }\n",
    "lib/format.ts": "export const format = (v: string) => v.trim()\n",
    "package.json": "{\"name\": \"demo\"}\n",
    "README.md": "# demo\n",
}


__all__ = ["NEXT_APP", "RepoBuilder"]
