"""Elastic Stream 异常定义模块."""


class ElasticStreamError(Exception):
    """Elastic Stream 基础异常类."""

    pass
