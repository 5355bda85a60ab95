"""CLI commands for Blog Explorer using Typer."""

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from blog_explorer.config import ContentSource, Settings, get_settings
from blog_explorer.core.explorer import ExplorerView
from blog_explorer.models.post import PostSummary
from blog_explorer.models.query import QueryState, SortMode, ViewMode
from blog_explorer.services.pages import (
    CategoryNotFoundError,
    build_categories_index_page,
    build_category_page,
    build_posts_page,
)
from blog_explorer.services.repository import create_repository
from blog_explorer.services.request_scope import RequestScope
from blog_explorer.utils.logging import setup_logging


app = typer.Typer(
    name="blog-explorer",
    help="Browse blog posts and categories from the CMS",
    no_args_is_help=True,
)

console = Console()


@app.callback()
def configure(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Browse blog posts and categories from the CMS."""
    settings = get_settings()
    setup_logging(verbose=verbose, log_file=settings.log_file if verbose else None)


def _resolve_settings(source: Optional[ContentSource], content_file: Optional[Path]) -> Settings:
    """Apply command-line overrides on top of the environment settings."""
    settings = get_settings()
    updates: dict = {}
    if source is not None:
        updates["content_source"] = source
    if content_file is not None:
        updates["content_file"] = content_file
        updates.setdefault("content_source", ContentSource.file)
    return settings.model_copy(update=updates) if updates else settings


def _new_scope(settings: Settings) -> RequestScope:
    return RequestScope(create_repository(settings))


def _print_empty(view: ExplorerView) -> None:
    if view.is_empty:
        console.print(f"[yellow]{view.empty_message}[/yellow]")


def _meta_row(post: PostSummary) -> str:
    """Date and read time, e.g. ``Jan 5, 2024 | 4 min read``."""
    parts = []
    if post.date_label:
        parts.append(post.date_label)
    if post.read_time:
        parts.append(f"{post.read_time} min read")
    return " | ".join(parts)


def _posts_table(posts: list[PostSummary], title: Optional[str] = None) -> Table:
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Title", style="cyan")
    table.add_column("Published")
    table.add_column("Read", justify="right")
    table.add_column("Anchor", style="dim")
    for post in posts:
        table.add_row(
            escape(post.title or "Untitled"),
            post.date_label or "",
            f"{post.read_time} min" if post.read_time else "",
            escape(f"#{post.anchor_id}"),
        )
    return table


# --- Posts Command ---


@app.command()
def posts(
    query: str = typer.Option("", "--query", "-q", help="Search categories or keywords"),
    sort: SortMode = typer.Option(SortMode.newest, "--sort", "-s", help="Sort order"),
    draft: bool = typer.Option(False, "--draft", help="Include draft posts"),
    source: Optional[ContentSource] = typer.Option(None, "--source", help="Content source"),
    content_file: Optional[Path] = typer.Option(None, "--file", "-f", help="JSON content export"),
):
    """Show the posts archive grouped by category."""
    settings = _resolve_settings(source, content_file)
    state = QueryState(query=query, sort=sort, draft=draft)
    page = asyncio.run(build_posts_page(_new_scope(settings), state, settings=settings))

    console.print(
        f"[bold]Posts[/bold] {page.total_posts}   "
        f"[bold]Categories[/bold] {len(page.categories)}"
    )

    if page.featured:
        table = Table(title="Featured", show_header=True, header_style="bold cyan")
        table.add_column("Category", style="cyan")
        table.add_column("Badge")
        table.add_column("Posts", justify="right")
        table.add_column("Description", style="dim")
        for category in page.featured:
            table.add_row(
                escape(category.display_title),
                escape(category.badge or ""),
                category.post_count_label,
                escape(category.description or ""),
            )
        console.print(table)

    _print_empty(page.view)
    for category in page.view.items:
        heading = f"{category.display_title} ({category.post_count_label})"
        if category.badge:
            heading += f" ({category.badge})"
        console.print(_posts_table(category.posts, title=escape(heading)))


# --- Categories Command ---


@app.command()
def categories(
    query: str = typer.Option("", "--query", "-q", help="Search categories"),
    source: Optional[ContentSource] = typer.Option(None, "--source", help="Content source"),
    content_file: Optional[Path] = typer.Option(None, "--file", "-f", help="JSON content export"),
):
    """Show the categories index ranked by post count."""
    settings = _resolve_settings(source, content_file)
    state = QueryState(query=query)
    page = asyncio.run(build_categories_index_page(_new_scope(settings), state, settings=settings))

    console.print(
        f"[bold]Categories[/bold] {len(page.index.items)}   "
        f"[bold]Posts tagged[/bold] {page.index.total_tagged}"
    )

    if page.featured:
        console.print("\n[bold]Featured[/bold] [dim]Top categories by post count[/dim]")
        for item in page.featured:
            console.print(f"  #{escape(item.slug)}  {escape(item.title)} - {item.post_count_label}")

    console.print(f"\nShowing {len(page.view.items)} categories")
    _print_empty(page.view)
    if page.view.items:
        table = Table(show_header=True, header_style="bold cyan")
        table.add_column("Category", style="cyan")
        table.add_column("URL", style="dim")
        table.add_column("Posts", justify="right")
        for item in page.view.items:
            table.add_row(escape(item.title), escape(item.url), item.post_count_label)
        console.print(table)


# --- Category Command ---


@app.command()
def category(
    slug: str = typer.Argument(..., help="Category slug"),
    query: str = typer.Option("", "--query", "-q", help="Search posts in this category"),
    sort: SortMode = typer.Option(SortMode.newest, "--sort", "-s", help="Sort order"),
    view: ViewMode = typer.Option(ViewMode.grid, "--view", help="Listing layout"),
    draft: bool = typer.Option(False, "--draft", help="Include draft posts"),
    source: Optional[ContentSource] = typer.Option(None, "--source", help="Content source"),
    content_file: Optional[Path] = typer.Option(None, "--file", "-f", help="JSON content export"),
):
    """Show one category and its posts."""
    settings = _resolve_settings(source, content_file)
    state = QueryState(query=query, sort=sort, view=view, draft=draft)

    try:
        page = asyncio.run(build_category_page(_new_scope(settings), slug, state, settings=settings))
    except CategoryNotFoundError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1)

    crumbs = " / ".join(item.label for item in page.breadcrumbs)
    console.print(f"[dim]{escape(crumbs)}[/dim]")
    heading = f"[bold]{escape(page.title)}[/bold]"
    if page.category.badge:
        heading += f" [magenta]{escape(page.category.badge)}[/magenta]"
    console.print(heading)
    if page.category.description:
        console.print(escape(page.category.description))
    console.print(f"[bold]Posts[/bold] {page.total_posts}")

    if page.related:
        console.print("\n[bold]Related categories[/bold]")
        for related in page.related:
            badge = f" ({related.badge})" if related.badge else ""
            console.print(f"  - {escape(related.display_title + badge)}  [dim]{escape(related.url)}[/dim]")

    if page.view.top:
        console.print("\n[bold]Jump to[/bold]")
        for post in page.view.top:
            console.print(f"  - {escape(post.title or 'Untitled')}  [dim]#{escape(post.anchor_id)}[/dim]")

    console.print()
    _print_empty(page.view)
    if not page.view.items:
        return
    if view == ViewMode.grid:
        console.print(_posts_table(page.view.items))
    else:
        for post in page.view.items:
            console.print(f"[cyan]{escape(post.title or 'Untitled')}[/cyan]")
            meta = _meta_row(post)
            if meta:
                console.print(f"  [dim]{meta}[/dim]")
            if post.meta.description:
                console.print(f"  {escape(post.meta.description)}")


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
