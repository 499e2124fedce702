# sqlreview/walker.py
"""
Single-pass multi-rule walker.

Each statement tree is traversed once, depth first. Every node is classified
once and dispatched to the rules whose declared interest contains its tag
(an O(1) index lookup). The walker never looks at semantic content.

A rule whose hook raises is disabled for the rest of the script; the other
rules keep receiving events and the failure is reported after the walk.
"""
import logging
from collections import defaultdict
from typing import List

from .events import EventTag, classify
from .errors import RuleError

logger = logging.getLogger(__name__)


class Walker:
    def __init__(self, rules):
        self.rules = list(rules)
        self.base_line = 0
        self._enter_index = defaultdict(list)
        self._exit_index = defaultdict(list)
        for i, rule in enumerate(self.rules):
            for tag in rule.enter_tags:
                self._enter_index[tag].append(i)
            for tag in rule.exit_tags:
                self._exit_index[tag].append(i)
        self._disabled = set()
        self._errors: List[RuleError] = []
        self._advice = []
        self._cursor = [0] * len(self.rules)

    def set_base_line(self, base_line: int):
        """Called before each statement; propagates to every rule."""
        self.base_line = base_line
        for rule in self.rules:
            rule.set_base_line(base_line)

    def walk(self, root):
        stack = [(root, None)]
        while stack:
            node, exit_tag = stack.pop()
            if exit_tag is not None:
                self._dispatch("on_exit", node, exit_tag, self._exit_index)
                continue

            tag = classify(node)
            if tag is not EventTag.UNINTERESTING:
                self._dispatch("on_enter", node, tag, self._enter_index)
                if tag in self._exit_index:
                    stack.append((node, tag))
            for child in reversed(node.children):
                stack.append((child, None))

    def finalize(self):
        """Run every surviving rule's post-script step, in registration order."""
        for i, rule in enumerate(self.rules):
            if i in self._disabled:
                continue
            try:
                rule.finalize()
            except Exception as e:
                self._fail(i, "finalize", e)
            self._drain(i)

    def advice(self):
        return list(self._advice)

    @property
    def errors(self) -> List[RuleError]:
        return list(self._errors)

    def _dispatch(self, hook, node, tag, index):
        for i in index.get(tag, ()):
            if i in self._disabled:
                continue
            try:
                getattr(self.rules[i], hook)(node, tag)
            except Exception as e:
                self._fail(i, tag, e)
            self._drain(i)

    def _fail(self, i, tag, cause):
        rule = self.rules[i]
        tag_name = tag.value if isinstance(tag, EventTag) else tag
        logger.warning("rule %s failed on %s, disabling it for this script: %s",
                       rule.name(), tag_name, cause,
                       extra={"rule": rule.name(), "tag": tag_name})
        self._disabled.add(i)
        self._errors.append(RuleError(rule.name(), tag_name, cause))

    def _drain(self, i):
        pending = self.rules[i].advice_list
        if len(pending) > self._cursor[i]:
            self._advice.extend(pending[self._cursor[i]:])
            self._cursor[i] = len(pending)
