"""
Rule Registry for quiz answer validation.

Maps a rule type name plus positional string arguments to a reusable
ValidationRule. Rule types are registered with a decorator; the factory's
signature declares how the string arguments are parsed:

- ``int`` parameters are parsed from decimal strings
- ``str`` (or unannotated) parameters are passed through
- a ``*values: str`` parameter collects the remaining arguments
- keyword-only parameters with defaults are options injected by callers
  through ``create(..., **options)``, never from string arguments
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple
import inspect
import re

from quiz_validation.logger import logger
from quiz_validation.settings import settings
from quiz_validation.validations.answer import Answer
from quiz_validation.validations.errors import (
    InvalidArgument,
    InvalidRuleSignatureError,
    RuleAlreadyRegisteredError,
    UnknownRuleType,
)


Check = Callable[[Answer], Optional[str]]

INTEGER_PATTERN = re.compile(r"[+-]?\d+", re.ASCII)


@dataclass(frozen=True)
class ValidationRule:
    """
    A constructed, stateless validation rule.

    Applying the rule returns None when the answer is valid, otherwise a
    human-readable message naming the question. Two rules built from the
    same type, arguments and options compare equal.

    Attributes:
        type_name: Registered rule type (e.g. "maxLength")
        params: Parsed construction arguments
        options: Keyword options as sorted (name, value) pairs
        check: Closure over params that evaluates one answer
    """
    type_name: str
    params: Tuple[Any, ...] = ()
    options: Tuple[Tuple[str, Any], ...] = ()
    check: Check = field(default=None, repr=False, compare=False)

    def apply(self, answer: Answer) -> Optional[str]:
        return self.check(answer)

    def __call__(self, answer: Answer) -> Optional[str]:
        return self.check(answer)


@dataclass
class ArgSpec:
    """One positional argument a rule type accepts."""
    name: str
    kind: type = str

    def parse(self, type_name: str, raw: Any) -> Any:
        if self.kind is int:
            return parse_int(type_name, self.name, raw)
        return raw if isinstance(raw, str) else str(raw)


@dataclass
class RuleTypeMetadata:
    """
    Metadata for a registered rule type.

    Attributes:
        name: Unique rule type name
        description: Human-readable description
        factory: Function building the rule check from parsed arguments
        args: Fixed positional arguments in order
        variadic: Trailing variadic argument, if any
        options: Names of keyword-only options the factory accepts
        category: Category for grouping related rule types
    """
    name: str
    description: str
    factory: Callable[..., Check]
    args: List[ArgSpec] = field(default_factory=list)
    variadic: Optional[ArgSpec] = None
    options: List[str] = field(default_factory=list)
    category: str = "general"

    @property
    def usage(self) -> str:
        parts = [f"{a.name}:{a.kind.__name__}" for a in self.args]
        if self.variadic is not None:
            parts.append(f"{self.variadic.name}:{self.variadic.kind.__name__}...")
        return f"{self.name}({', '.join(parts)})"


def parse_int(type_name: str, arg_name: str, raw: Any) -> int:
    """
    Parse an integer rule argument.

    Raises:
        InvalidArgument: If the argument is not a decimal integer
    """
    if isinstance(raw, int) and not isinstance(raw, bool):
        return raw
    if isinstance(raw, str):
        text = raw.strip()
        if INTEGER_PATTERN.fullmatch(text):
            return int(text)
    raise InvalidArgument(type_name, f"'{arg_name}' must be an integer, got {raw!r}")


def _annotation_kind(annotation: Any) -> Optional[type]:
    if annotation is inspect.Parameter.empty or annotation in (str, "str"):
        return str
    if annotation in (int, "int"):
        return int
    return None


class RuleRegistry:
    """
    Registry of validation rule types.

    Example:
        registry = RuleRegistry("quiz")

        @registry.rule_type("maxLength", category="length")
        def max_length(length: int):
            def check(answer: Answer) -> Optional[str]:
                ...
            return check

        rule = registry.create("maxLength", ["3"])
        rule(Answer("q1", "abcd"))
    """

    def __init__(self, name: str, allow_overwrite: bool = False):
        self.name = name
        self.allow_overwrite = allow_overwrite
        self._rule_types: Dict[str, RuleTypeMetadata] = {}
        self._categories: Dict[str, List[str]] = {}

    def rule_type(
        self,
        name: str,
        description: str = "",
        category: str = "general"
    ) -> Callable[[Callable[..., Check]], Callable[..., Check]]:
        """
        Decorator for registering a rule type.

        Args:
            name: Unique rule type name used in configuration
            description: Human-readable description (falls back to docstring)
            category: Category for grouping related rule types

        Raises:
            RuleAlreadyRegisteredError: If the name is already registered
            InvalidRuleSignatureError: If the factory signature is unsupported
        """
        def decorator(factory: Callable[..., Check]) -> Callable[..., Check]:
            args, variadic, options = self._inspect_signature(name, factory)

            if name in self._rule_types and not self.allow_overwrite:
                raise RuleAlreadyRegisteredError(name, self.name)

            metadata = RuleTypeMetadata(
                name=name,
                description=description or inspect.getdoc(factory) or "",
                factory=factory,
                args=args,
                variadic=variadic,
                options=options,
                category=category,
            )
            previous = self._rule_types.get(name)
            if previous is not None:
                self._remove_from_category(previous)

            self._rule_types[name] = metadata
            self._categories.setdefault(category, [])
            if name not in self._categories[category]:
                self._categories[category].append(name)

            factory._rule_type = name  # type: ignore
            factory._registry = self.name  # type: ignore
            return factory

        return decorator

    def _inspect_signature(
        self,
        name: str,
        factory: Callable[..., Check]
    ) -> Tuple[List[ArgSpec], Optional[ArgSpec], List[str]]:
        args: List[ArgSpec] = []
        variadic: Optional[ArgSpec] = None
        options: List[str] = []

        for param in inspect.signature(factory).parameters.values():
            kind = _annotation_kind(param.annotation)

            if param.kind is inspect.Parameter.KEYWORD_ONLY:
                if param.default is inspect.Parameter.empty:
                    raise InvalidRuleSignatureError(
                        name, f"option '{param.name}' must have a default"
                    )
                options.append(param.name)
                continue

            if kind is None:
                raise InvalidRuleSignatureError(
                    name,
                    f"parameter '{param.name}' must be annotated as int or str"
                )

            if param.kind is inspect.Parameter.VAR_POSITIONAL:
                variadic = ArgSpec(param.name, kind)
            elif param.kind in (
                inspect.Parameter.POSITIONAL_ONLY,
                inspect.Parameter.POSITIONAL_OR_KEYWORD,
            ):
                if param.default is not inspect.Parameter.empty:
                    raise InvalidRuleSignatureError(
                        name, f"positional parameter '{param.name}' cannot have a default"
                    )
                args.append(ArgSpec(param.name, kind))
            else:
                raise InvalidRuleSignatureError(
                    name, f"unsupported parameter '**{param.name}'"
                )

        return args, variadic, options

    def register(
        self,
        name: str,
        factory: Callable[..., Check],
        description: str = "",
        category: str = "general"
    ) -> None:
        """Register a rule type programmatically (non-decorator style)."""
        self.rule_type(name, description, category)(factory)

    def unregister(self, name: str) -> bool:
        """
        Remove a rule type.

        Returns:
            True if it was removed, False if it didn't exist
        """
        metadata = self._rule_types.pop(name, None)
        if metadata is None:
            return False
        self._remove_from_category(metadata)
        return True

    def _remove_from_category(self, metadata: RuleTypeMetadata) -> None:
        names = self._categories.get(metadata.category)
        if names and metadata.name in names:
            names.remove(metadata.name)
            if not names:
                del self._categories[metadata.category]

    def create(
        self,
        type_name: str,
        args: Optional[Sequence[Any]] = None,
        **options: Any
    ) -> ValidationRule:
        """
        Build a rule from its type name and string arguments.

        Args:
            type_name: Registered rule type name
            args: Positional arguments, usually strings from configuration
            **options: Keyword options accepted by the rule type

        Returns:
            A ValidationRule ready to apply to answers

        Raises:
            UnknownRuleType: If type_name is not registered
            InvalidArgument: If arguments are missing, extra or malformed
        """
        metadata = self._rule_types.get(type_name)
        if metadata is None:
            logger.warning("Unknown rule type", rule_type=type_name, registry=self.name)
            raise UnknownRuleType(type_name, self.name)

        try:
            params = self._parse_args(metadata, list(args or ()))
            unknown = sorted(set(options) - set(metadata.options))
            if unknown:
                raise InvalidArgument(type_name, f"unknown option(s): {', '.join(unknown)}")
            check = metadata.factory(*params, **options)
        except InvalidArgument as e:
            logger.warning("Invalid rule arguments", rule_type=type_name, reason=e.reason)
            raise

        if settings.get_nested("validation.log_each_rule", False):
            check = _logged(type_name, check)

        logger.debug("Rule created", rule_type=type_name, params=params)
        return ValidationRule(
            type_name=type_name,
            params=tuple(params),
            options=tuple(sorted(options.items())),
            check=check,
        )

    def _parse_args(self, metadata: RuleTypeMetadata, args: List[Any]) -> List[Any]:
        expected = len(metadata.args)
        if len(args) < expected or (metadata.variadic is None and len(args) > expected):
            qualifier = "at least " if metadata.variadic is not None else ""
            raise InvalidArgument(
                metadata.name,
                f"expected {qualifier}{expected} argument(s) for {metadata.usage}, got {len(args)}"
            )

        parsed = [
            spec.parse(metadata.name, raw)
            for spec, raw in zip(metadata.args, args)
        ]
        if metadata.variadic is not None:
            parsed.extend(
                metadata.variadic.parse(metadata.name, raw)
                for raw in args[expected:]
            )
        return parsed

    def get(self, name: str) -> Optional[RuleTypeMetadata]:
        """Get metadata for a rule type."""
        return self._rule_types.get(name)

    def has(self, name: str) -> bool:
        """Check if a rule type exists."""
        return name in self._rule_types

    def list_all(self) -> List[str]:
        """List all rule type names."""
        return list(self._rule_types.keys())

    def list_by_category(self, category: str) -> List[str]:
        """List rule type names in a category."""
        return list(self._categories.get(category, []))

    def get_categories(self) -> List[str]:
        """List all categories."""
        return list(self._categories.keys())

    def get_documentation(self) -> str:
        """
        Generate documentation for all rule types in the registry.

        Returns:
            Markdown-formatted documentation string
        """
        lines = [f"# {self.name.replace('_', ' ').title()} Validation Rules\n"]
        lines.append(f"Total rule types: {len(self._rule_types)}\n")

        for category in sorted(self._categories.keys()):
            lines.append(f"\n## {category.title()}\n")
            for name in sorted(self._categories[category]):
                meta = self._rule_types[name]
                lines.append(f"### `{meta.usage}`")
                if meta.description:
                    lines.append(f"\n{meta.description}")
                lines.append("")

        return "\n".join(lines)

    def get_stats(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "total_rule_types": len(self._rule_types),
            "total_categories": len(self._categories),
            "rule_types_by_category": {
                cat: len(names) for cat, names in self._categories.items()
            }
        }

    def __len__(self) -> int:
        return len(self._rule_types)

    def __contains__(self, name: str) -> bool:
        return name in self._rule_types

    def __repr__(self) -> str:
        return f"RuleRegistry(name={self.name!r}, rule_types={len(self._rule_types)})"


def _logged(type_name: str, check: Check) -> Check:
    def wrapper(answer: Answer) -> Optional[str]:
        message = check(answer)
        logger.debug(
            "Rule applied",
            rule_type=type_name,
            question_id=answer.question_id,
            result="FAIL" if message else "PASS",
        )
        return message
    return wrapper
