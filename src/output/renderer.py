"""Jinja2-based template renderer for meeting minutes."""

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, TemplateNotFound

from src.output.schemas import MinutesContext, RenderedMinutes

DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


class MinutesRenderer:
    """Render meeting minutes as Markdown from Jinja2 templates."""

    def __init__(self, template_dir: str | Path = DEFAULT_TEMPLATE_DIR):
        """Initialize renderer with template directory.

        Args:
            template_dir: Path to directory containing .md.j2 templates.
                          Defaults to the bundled templates.
        """
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

    def render(
        self,
        context: MinutesContext,
        template_name: str = "minutes",
    ) -> RenderedMinutes:
        """Render meeting minutes.

        Args:
            context: MinutesContext with meeting data and summary
            template_name: Base name of template (without .md.j2)

        Returns:
            RenderedMinutes with the Markdown text

        Raises:
            TemplateNotFound: If the template file doesn't exist
        """
        template = self.env.get_template(f"{template_name}.md.j2")
        markdown = template.render(
            meeting_id=str(context.meeting_id),
            started_at=context.started_at,
            ended_at=context.ended_at,
            attendees=context.attendees,
            message_count=context.message_count,
            summary=context.summary,
        )
        return RenderedMinutes(
            meeting_id=context.meeting_id,
            markdown=markdown,
            template_used=template_name,
        )


__all__ = ["MinutesRenderer", "TemplateNotFound"]
