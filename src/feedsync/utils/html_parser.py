"""HTML 解析工具."""

from bs4 import BeautifulSoup


def extract_first_image(html: str) -> str | None:
    """
    提取文章 HTML 中第一张图片的地址，用作缩略图.

    Args:
        html: 文章 HTML

    Returns:
        图片 URL；没有带 src 的 <img> 时返回 None
    """
    if not html or "<img" not in html:
        return None

    img = BeautifulSoup(html, "lxml").find("img", src=True)
    if img is None:
        return None

    src = img.get("src")
    # 多值属性时取第一个
    if isinstance(src, list):
        src = src[0] if src else ""
    return src.strip() or None


def html_to_text(html: str) -> str:
    """
    将 HTML 转换为纯文本，用于文章摘要.

    Args:
        html: HTML 内容

    Returns:
        去掉标签和脚本、空白合并后的单行文本
    """
    if not html:
        return ""
    if "<" not in html:
        return " ".join(html.split())

    soup = BeautifulSoup(html, "lxml")
    for element in soup(["script", "style"]):
        element.decompose()

    return " ".join(soup.get_text(" ").split())
