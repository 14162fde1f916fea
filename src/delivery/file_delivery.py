"""
File delivery channel
"""
import json
from pathlib import Path
from typing import List

from core.schemas import UpAheadDigest
from delivery.base import DeliveryChannel


def render_markdown(digest: UpAheadDigest) -> str:
    md_lines = list[str]()

    md_lines.append("# Up Ahead")
    md_lines.append(f"_Last updated: {digest.last_updated}_")
    md_lines.append("")

    for day in digest.timeline:
        md_lines.append(f"## {day.label} ({day.date_key})")
        for item in day.items:
            md_lines.append(f"- **{item.title}** [{item.subtitle}]")
            if item.link:
                md_lines.append(f"  {item.link}")
        md_lines.append("")

    for category, entries in digest.sections.items():
        if not entries:
            continue
        md_lines.append(f"### {category.replace('_', ' ').title()}")
        for entry in entries:
            suffix = f" ({entry.date})" if entry.date else ""
            md_lines.append(f"- {entry.title}{suffix}")
        md_lines.append("")

    md_lines.append("## This week")
    for day_name, plan_items in digest.weekly_plan.items():
        titles: List[str] = [f"{p.icon} {p.title}" for p in plan_items]
        md_lines.append(f"- **{day_name}:** {', '.join(titles) if titles else '-'}")

    return "\n".join(md_lines) + "\n"


class FileDelivery(DeliveryChannel):
    name = "file"

    def __init__(self, output_dir: str = "output"):
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

    async def deliver(
        self,
        *,
        digest_name: str,
        digest_date: str,
        digest: UpAheadDigest,
    ) -> None:
        base = self.output_dir / f"{digest_name}_{digest_date}"

        json_path = base.with_suffix(".json")
        md_path = base.with_suffix(".md")

        json_path.write_text(
            json.dumps(digest.to_payload(), indent=2, ensure_ascii=False),
            encoding="utf-8",
        )
        md_path.write_text(render_markdown(digest), encoding="utf-8")
