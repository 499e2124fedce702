# sqlreview/rules/function_disallowed_list_rule.py
"""
Calls to disallowed functions are reported, matched case-insensitively.

Example (list: ["SLEEP", "RAND"]):
  ❌ SELECT SLEEP(1);
"""
from ..advice import Code
from ..events import EventTag
from ..normalize import function_names
from .rule_base import RuleBase


class FunctionDisallowedListRule(RuleBase):
    id = "system.function.disallowed-list"
    rule_name = "Function disallow list"
    enter_tags = frozenset({EventTag.FUNCTION_CALL})
    default_payload = {"list": ["SLEEP", "BENCHMARK"]}

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.disallowed = {f.upper() for f in self.payload_list("list")}

    def on_enter(self, node, tag):
        for name in function_names(node.expression, self.dialect):
            if name in self.disallowed:
                self.add_advice(Code.DISABLED_FUNCTION, f"Disallowed function: {name}", node)
                return
