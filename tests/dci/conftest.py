"""Fixtures for DCI model, builder and rule tests.

Sources are real PHP, run through the tree-sitter host lexer.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

import pytest

from dcilint.config.models import DciConfig
from dcilint.dci.builder import ContextBuilder
from dcilint.dci.conventions import NamingConvention
from dcilint.dci.diagnostics import DiagnosticCollector
from dcilint.dci.model import Context
from dcilint.dci.rules import RuleEngine
from dcilint.lint.models import Diagnostic
from dcilint.parsing.php import PhpTokenizer
from dcilint.parsing.tokens import TokenStream

MONEY_TRANSFER = """<?php
/**
 * @context
 */
final class MoneyTransfer {
    public function __construct($source, $destination, $amount) {
        $this->source = $source;
        $this->destination = $destination;
        $this->_amount = $amount;
    }

    public function transfer() {
        $this->source_withdraw();
    }

    private Source $source;

    protected function source_withdraw() {
        $this->source->decreaseBalance($this->_amount);
        $this->destination_deposit();
    }

    private Destination $destination;

    protected function destination_deposit() {
        $this->destination->increaseBalance($this->_amount);
    }

    private int $_amount;
}
"""


def _line_of(source: str, needle: str) -> int:
    """1-based line of the first line containing needle."""
    for number, line in enumerate(source.splitlines(), start=1):
        if needle in line:
            return number
    raise AssertionError(f"{needle!r} not in source")


@dataclass
class Analysis:
    """Everything one builder run produced."""

    stream: TokenStream
    contexts: list[Context] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def codes(self) -> list[str]:
        return [d.code for d in self.diagnostics]

    def with_code(self, code: str) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.code == code]

    @property
    def context(self) -> Context:
        assert len(self.contexts) == 1
        return self.contexts[0]


Analyze = Callable[..., Analysis]


@pytest.fixture(scope="session")
def tokenizer() -> PhpTokenizer:
    return PhpTokenizer()


@pytest.fixture
def analyze(tokenizer: PhpTokenizer) -> Analyze:
    """Build (and by default check) every Context in a PHP source."""

    def _analyze(source: str, *, rules: bool = True, config: DciConfig | None = None) -> Analysis:
        config = config or DciConfig()
        stream = tokenizer.tokenize(source)
        sink = DiagnosticCollector(stream, "test.php")
        analysis = Analysis(stream=stream)

        handlers: list[Callable[[Context], object]] = [analysis.contexts.append]
        if rules:
            handlers.append(RuleEngine(sink, config).check)

        ContextBuilder(stream, sink, NamingConvention.from_config(config), handlers).run()
        analysis.diagnostics = sink.diagnostics
        return analysis

    return _analyze


@pytest.fixture
def money_transfer() -> str:
    """A Context that follows every convention."""
    return MONEY_TRANSFER


@pytest.fixture
def line_of() -> Callable[[str, str], int]:
    return _line_of
