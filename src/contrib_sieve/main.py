"""CLI 엔트리포인트."""

import asyncio
import logging
from collections.abc import Coroutine
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from contrib_sieve.auth import Authorizer, UrlLocation
from contrib_sieve.client import GitHubClient
from contrib_sieve.config import settings
from contrib_sieve.exceptions import ContribSieveError
from contrib_sieve.models import ItemType, RepoAggregate
from contrib_sieve.storage import ACCESS_TOKEN_KEY, JsonFileStore

console = Console()

app = typer.Typer(
    name="contrib-sieve",
    help="다른 사람의 저장소에 보낸 PR과 이슈를 저장소별로 집계합니다.",
    no_args_is_help=True,
)


@app.callback()
def _configure(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="디버그 로그 출력"),
    ] = False,
) -> None:
    """로깅을 설정한다."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _store() -> JsonFileStore:
    return JsonFileStore(settings.token_store_path)


def _run(coro: Coroutine[Any, Any, None]) -> None:
    """코루틴을 실행하고 오류를 CLI 종료 코드로 변환한다."""
    try:
        asyncio.run(coro)
    except KeyboardInterrupt:
        console.print("\n[dim]중단됨[/dim]")
        raise typer.Exit(0) from None
    except ContribSieveError as e:
        console.print(f"[red]오류 발생: {e}[/red]")
        raise typer.Exit(1) from e


def _render_aggregates(
    author: str, item_type: ItemType, aggregates: list[RepoAggregate]
) -> None:
    """집계 결과를 Rich 테이블로 렌더링한다."""
    kind = "PR" if item_type == ItemType.pr else "이슈"
    if not aggregates:
        console.print(f"\n[yellow]{author}의 외부 저장소 {kind}가 없습니다.[/yellow]")
        return

    table = Table(
        title=f"{author}의 {kind} ({len(aggregates)}개 저장소)",
        show_header=True,
        header_style="bold cyan",
        expand=True,
    )
    table.add_column("#", style="dim", width=3)
    table.add_column("저장소", style="bold")
    table.add_column("언어", width=12)
    table.add_column("⭐ Stars", justify="right", width=10)
    table.add_column("Open", justify="right", width=6)
    table.add_column("Closed", justify="right", width=7)
    if item_type == ItemType.pr:
        table.add_column("Merged", justify="right", width=7)
    table.add_column("최근 수정", width=12)

    for i, agg in enumerate(aggregates, 1):
        repo = agg.repository
        row = [
            str(i),
            f"[link={repo.html_url}]{repo.full_name}[/link]",
            repo.language or "-",
            f"{repo.stargazers_count:,}",
            f"[link={agg.open_html_url}]{agg.open}[/link]",
            f"[link={agg.closed_html_url}]{agg.closed}[/link]",
        ]
        if item_type == ItemType.pr:
            row.append(f"[link={agg.merged_html_url}][green]{agg.merged}[/green][/link]")
        row.append(agg.updated_at.strftime("%Y-%m-%d"))
        table.add_row(*row)

    console.print()
    console.print(table)


async def _aggregate(author: str, item_type: ItemType) -> None:
    store = _store()
    async with GitHubClient(author, settings=settings, store=store) as client:
        # 저장된 token이 없으면 익명으로 검색한다
        if store.get(ACCESS_TOKEN_KEY):
            await client.authorize()

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            progress.add_task("GitHub 검색 및 저장소 정보 수집 중...", total=None)
            if item_type == ItemType.pr:
                aggregates = await client.aggregate_pull_requests()
            else:
                aggregates = await client.aggregate_issues()

    if aggregates is None:
        console.print(
            "[yellow]저장된 token이 만료되었습니다. "
            "`contrib-sieve login`으로 다시 인증하세요.[/yellow]"
        )
        raise typer.Exit(1)

    _render_aggregates(author, item_type, aggregates)


@app.command()
def prs(
    author: Annotated[str, typer.Argument(help="GitHub 사용자 이름")],
) -> None:
    """외부 저장소에 보낸 PR을 집계합니다."""
    _run(_aggregate(author, ItemType.pr))


@app.command()
def issues(
    author: Annotated[str, typer.Argument(help="GitHub 사용자 이름")],
) -> None:
    """외부 저장소에 작성한 이슈를 집계합니다."""
    _run(_aggregate(author, ItemType.issue))


async def _user(author: str) -> None:
    store = _store()
    async with GitHubClient(author, settings=settings, store=store) as client:
        if store.get(ACCESS_TOKEN_KEY):
            await client.authorize()
        user = await client.get_user()

    if user is None:
        console.print("[yellow]인증이 필요합니다. `contrib-sieve login`을 실행하세요.[/yellow]")
        raise typer.Exit(1)

    lines = [f"🔗 {user.html_url}"]
    if user.bio:
        lines.append(user.bio)
    if user.location:
        lines.append(f"📍 {user.location}")
    title = f"[bold]{user.name or user.login}[/bold] [dim]({user.login})[/dim]"
    console.print(Panel("\n".join(lines), title=title, border_style="blue"))


@app.command()
def user(
    author: Annotated[str, typer.Argument(help="GitHub 사용자 이름")],
) -> None:
    """사용자 프로필을 출력합니다."""
    _run(_user(author))


async def _login(callback: str | None) -> None:
    store = _store()
    location = UrlLocation(
        callback or settings.redirect_uri,
        on_redirect=lambda url: console.print(
            Panel(
                f"브라우저에서 아래 URL을 열어 인증한 뒤,\n"
                f"돌아온 주소로 `contrib-sieve login --callback <URL>`을 실행하세요.\n\n{url}",
                title="GitHub 인증",
                border_style="cyan",
            )
        ),
    )
    authorizer = Authorizer(
        store=store,
        location=location,
        client_id=settings.oauth_client_id,
        gateway_url=settings.oauth_gateway_url,
        web_url=settings.github_web_url,
        timeout=settings.request_timeout,
    )
    token = await authorizer.authorize()

    if token:
        console.print("[green]✓[/green] 인증되었습니다.")


@app.command()
def login(
    callback: Annotated[
        str | None,
        typer.Option(
            "--callback",
            "-c",
            help="GitHub 인증 후 돌아온 URL (code, state 포함)",
        ),
    ] = None,
) -> None:
    """GitHub OAuth로 인증합니다."""
    _run(_login(callback))


@app.command()
def logout() -> None:
    """저장된 access token을 삭제합니다."""
    _store().delete(ACCESS_TOKEN_KEY)
    console.print("[green]✓[/green] 로그아웃되었습니다.")


if __name__ == "__main__":
    app()
