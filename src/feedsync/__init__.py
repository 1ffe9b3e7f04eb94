"""feedsync - RSS 订阅同步与本地缓存."""

__version__ = "0.1.0"
