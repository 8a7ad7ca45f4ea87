"""
Defines the abstract syntax tree (AST) node structure for the Sprout programming language.

Classes:
    ASTNode:
        A node in the syntax tree. The `kind` tag selects the variant; each
        variant uses `value`, `type`, `children` and `else_children` as below.

    ASTDict:
        TypedDict representation for serializing ASTNode instances to plain
        dictionaries, suitable for JSON output or fixtures.

Statement kinds:
    func          value=name, children=body
    assign        value=name, type="let" | "const", children=[initializer]
    expr_stmt     children=[expression]
    return        children=[] or [expression]
    if            value=condition, children=then-block, else_children=else-block
    block         children=statements

Expression kinds:
    identifier    value=name
    string        value=text
    number        value=int
    boolean       value=bool
    compare       value=operator name (e.g. "GreaterThan"), children=[left, right]
    if_shorthand  children=[condition, then, otherwise]
    anon_func     children=body

Example:
    node = ASTNode("assign", value="x", children=[ASTNode("number", 5)], type_="let")
"""

from typing import Any, TypedDict, Union

NodeValue = Union[str, int, bool, "ASTNode", None]


class ASTDict(TypedDict, total=False):
    """
    TypedDict representation of an ASTNode used for serialization.

    Fields:
        kind (str): The type of AST node (e.g., "func", "assign", "compare").
        value (Any): A literal value, a name, or a nested ASTDict.
        line (int): Line number in the source code where the node originates.
        col (int): Column number in the source code where the node originates.
        type (Optional[str]): Binding kind for assignments.
        children (List[ASTDict]): Primary child nodes.
        else_children (List[ASTDict]): Else-branch statements of an `if`.
    """

    kind: str
    value: Any
    line: int
    col: int
    type: str | None
    children: list["ASTDict"]
    else_children: list["ASTDict"]


class ASTNode:
    """
    Represents a node in the abstract syntax tree (AST) for the Sprout language.

    Args:
        kind (str): The node variant (see module docstring).
        value (str | int | bool | ASTNode, optional): Name, literal value,
            operator name, or condition node.
        children (list[ASTNode], optional): Primary child nodes.
        line (int): Source line number (default is 0).
        col (int): Source column number (default is 0).
        type_ (str, optional): Binding kind for assignments ("let" or "const").

    Attributes:
        else_children (list[ASTNode]): Statements of an `if` node's else branch.
    """

    def __init__(
        self,
        kind: str,
        value: NodeValue = None,
        children: list["ASTNode"] | None = None,
        line: int = 0,
        col: int = 0,
        type_: str | None = None,
    ):
        self.kind = kind
        self.value = value
        self.children: list["ASTNode"] = children or []
        self.line = line
        self.col = col
        self.type = type_
        self.else_children: list["ASTNode"] = []

    def __repr__(self) -> str:
        parts = [f"{self.kind}"]
        if self.value is not None:
            parts.append(f"value={repr(self.value)}")
        if self.type is not None:
            parts.append(f"type_={self.type}")
        if self.children:
            preview = ", ".join(repr(c) for c in self.children[:3])
            if len(self.children) > 3:
                preview += ", ..."
            parts.append(f"children=[{preview}]")
        if self.else_children:
            preview = ", ".join(repr(c) for c in self.else_children[:3])
            if len(self.else_children) > 3:
                preview += ", ..."
            parts.append(f"else_children=[{preview}]")
        return f"ASTNode({', '.join(parts)})"

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, ASTNode):
            return False
        # True == 1 in Python; a boolean literal must not equal a number
        values_equal = (
            type(self.value) is type(other.value) and self.value == other.value
        )
        return (
            self.kind == other.kind
            and values_equal
            and self.line == other.line
            and self.col == other.col
            and self.type == other.type
            and self.children == other.children
            and self.else_children == other.else_children
        )

    def to_dict(self) -> ASTDict:
        val: Any = self.value
        if isinstance(val, ASTNode):
            val = val.to_dict()

        return {
            "kind": self.kind,
            "value": val,
            "line": self.line,
            "col": self.col,
            "type": self.type,
            "children": [c.to_dict() for c in self.children],
            "else_children": [c.to_dict() for c in self.else_children],
        }
