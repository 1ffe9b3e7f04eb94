"""OPML 订阅列表解析."""

from lxml import etree

from feedsync.core.errors import ParseError
from feedsync.models.feed import OutlineEntry


def parse_opml(opml_text: str) -> list[OutlineEntry]:
    """
    解析 OPML，返回带 xmlUrl 的 outline 列表（保持文档顺序）.

    Args:
        opml_text: OPML 原始文本

    Returns:
        outline 列表

    Raises:
        ParseError: XML 格式错误，或没有任何带 xmlUrl 的 outline
    """
    if not opml_text.strip():
        msg = "OPML 内容为空"
        raise ParseError(msg)

    parser = etree.XMLParser(resolve_entities=False, no_network=True)
    try:
        root = etree.fromstring(opml_text.strip().encode("utf-8"), parser=parser)
    except etree.XMLSyntaxError as e:
        msg = f"OPML 文件解析失败，请检查格式: {e}"
        raise ParseError(msg) from e

    entries: list[OutlineEntry] = []
    for outline in root.iter("outline"):
        xml_url = outline.get("xmlUrl") or outline.get("xmlurl") or ""
        if not xml_url:
            # 分类节点
            continue
        text = outline.get("text") or None
        entries.append(
            OutlineEntry(
                xml_url=xml_url,
                title=outline.get("title") or text,
                html_url=outline.get("htmlUrl") or None,
                text=text,
            )
        )

    if not entries:
        msg = "OPML 文件中没有找到任何订阅源"
        raise ParseError(msg)
    return entries
