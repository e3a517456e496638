#!/usr/bin/env python3
import logging
from typing import Optional

from prompt_toolkit import PromptSession
from rich.box import ROUNDED
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from .chat_generator import DeepSeekClient
from .config import Settings
from .errors import KBAgentError
from .knowledge import KnowledgeBase
from .prompt import build_prompt

logger = logging.getLogger(__name__)


class AppContext:
    """Everything a query needs, built once at startup and read-only afterwards"""

    def __init__(self, settings: Settings, knowledge_base: KnowledgeBase, client: DeepSeekClient):
        self.settings = settings
        self.knowledge_base = knowledge_base
        self.client = client


def answer_query(ctx: AppContext, query: str) -> str:
    """Build the prompt for one query and ask the model. The only side effect is the HTTP call."""
    return ctx.client.ask(build_prompt(ctx.knowledge_base, query))


class ChatInterface:
    def __init__(self, ctx: AppContext, session=None, console: Optional[Console] = None):
        self.ctx = ctx
        self.session = session or PromptSession()
        self.console = console or Console()
        self.exit_keyword = ctx.settings.exit_keyword.lower()
        self.running = False

    def should_exit(self, query: str) -> bool:
        return query.strip().lower() == self.exit_keyword

    def display_answer(self, answer: str):
        width = min(100, self.console.width - 2)
        self.console.print(Panel(
            Text(answer, style="white"),
            title="[green]🤖 Ответ[/]",
            box=ROUNDED,
            border_style="green",
            width=width,
        ))

    def display_error(self, error: Exception):
        self.console.print(Text(f"❌ Ошибка: {error}", style="red"))

    def handle_query(self, query: str):
        """Run one query; failures are reported and never end the loop"""
        try:
            answer = answer_query(self.ctx, query)
        except KBAgentError as e:
            # The console line below is the user-facing report
            logger.debug(f"Query failed: {e!r}")
            self.display_error(e)
            return None

        self.display_answer(answer)
        return answer

    def run(self):
        self.console.print("[yellow]🤖 AI-агент техподдержки (JSON+RAG)[/]")
        self.console.print(f"Введите запрос (или '{self.ctx.settings.exit_keyword}'):")

        self.running = True
        while self.running:
            try:
                query = self.session.prompt("> ")
            except KeyboardInterrupt:
                # Ctrl+C drops the current line only
                continue
            except EOFError:
                break

            query = query.strip()
            if self.should_exit(query):
                break

            self.handle_query(query)

        self.running = False
