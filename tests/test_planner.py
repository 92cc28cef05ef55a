"""Tests for zendoc.planner."""

from __future__ import annotations

from zendoc.models import Category
from zendoc.planner import DocPlanner, group_by_category
from zendoc.repo_scanner import TreeWalker


def _slugs(plan) -> dict[str, str]:
    return {target.record.relative_path: target.sidebar_slug for target in plan.targets}


def test_plan_next_app(next_app) -> None:
    plan = next_app.plan()

    assert _slugs(plan) == {
        "components/Button.tsx": "components/Button-component",
        "app/(marketing)/about/page.tsx": "pages/about-page",
        "app/blog/[slug]/page.tsx": "pages/blog-slug-page",
        "app/page.tsx": "pages/index-page",
        "app/api/users/[id]/route.ts": "api/delete-delete-users",
        "app/api/users/route.ts": "api/get-all-users",
        "lib/format.ts": "lib/format-utility",
    }
    assert [group.label for group in plan.sidebar] == [
        "Components",
        "Pages",
        "API Routes",
        "Libraries & Utilities",
    ]
    api_labels = [item.label for item in plan.sidebar[2].items]
    assert api_labels == ["DELETE /api/users/:id", "GET /api/users"]


def test_plan_counts_include_irrelevant_records(next_app) -> None:
    counts = next_app.plan().category_counts()
    assert counts["config"] == 1
    assert counts["other"] == 1
    assert counts["pages"] == 3


def test_plan_is_idempotent(next_app) -> None:
    first = next_app.plan()
    second = next_app.plan()
    assert [(t.record.relative_path, t.slug) for t in first.targets] == [
        (t.record.relative_path, t.slug) for t in second.targets
    ]
    assert [g.to_dict() for g in first.sidebar] == [g.to_dict() for g in second.sidebar]


def test_collisions_follow_lexicographic_order(repo_builder) -> None:
    repo_builder.write(
        {
            "src/components/ui/Button.tsx": "export {}\n",
            "components/Button.tsx": "export {}\n",
            "src/components/forms/Button.tsx": "export {}\n",
        }
    )

    assert _slugs(repo_builder.plan()) == {
        "components/Button.tsx": "components/Button-component",
        "src/components/forms/Button.tsx": "components/Button-component-2",
        "src/components/ui/Button.tsx": "components/Button-component-3",
    }


def test_sidebar_slugs_are_unique_and_match_targets(repo_builder) -> None:
    repo_builder.write(
        {
            "app/api/users/route.ts": "export async function GET() {}\n",
            "pages/api/users.get.ts": "export default handler\n",
            "src/app/api/users/route.ts": "export function GET() {}\n",
            "lib/a.ts": "",
            "utils/a.ts": "",
        }
    )
    plan = repo_builder.plan()

    sidebar_slugs = [item.slug for group in plan.sidebar for item in group.items]
    assert len(sidebar_slugs) == len(set(sidebar_slugs))
    assert sorted(sidebar_slugs) == sorted(target.sidebar_slug for target in plan.targets)
    assert {target.doc_path for target in plan.targets} == {
        f"{slug}.md" for slug in sidebar_slugs
    }


def test_include_restricts_records(next_app) -> None:
    plan = next_app.plan(include=["components", "/lib/"])
    assert sorted(_slugs(plan)) == ["components/Button.tsx", "lib/format.ts"]


def test_walker_patterns_prune_whole_trees(next_app) -> None:
    walker = TreeWalker(extra_patterns=["app/"])
    plan = DocPlanner(walker=walker).plan(next_app.path())
    assert Category.PAGES not in plan.grouped()
    assert Category.API not in plan.grouped()
    grouped = group_by_category(plan.records)
    assert list(grouped) == [Category.COMPONENTS, Category.LIB]
