"""Knowledge base categories and the sample consultation queue."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator


@dataclass
class KnowledgeNode:
    """A category or entry in the knowledge base tree."""

    title: str
    children: list["KnowledgeNode"] = field(default_factory=list)

    def walk(self) -> Iterator["KnowledgeNode"]:
        """Yield this node and all its descendants, depth first, parents before children."""
        yield self
        for child in self.children:
            yield from child.walk()


def default_knowledge_tree() -> KnowledgeNode:
    """Return the built-in knowledge categories."""
    return KnowledgeNode(
        "知识分类",
        [
            KnowledgeNode("挂号相关", [KnowledgeNode("挂号流程"), KnowledgeNode("挂号时间")]),
            KnowledgeNode("就医指南", [KnowledgeNode("部门介绍"), KnowledgeNode("检查项目")]),
        ],
    )


def default_consultations() -> list[str]:
    """Return the built-in list of visitors awaiting consultation."""
    return ["访客001 - 咨询挂号", "访客002 - 检查报告", "访客003 - 用药咨询"]