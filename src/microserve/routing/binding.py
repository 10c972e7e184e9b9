"""
Query-string → handler argument binding.

    descriptor.parameter_bindings = (ParameterBinding("name", "World"),
                                     ParameterBinding("age", "0"))

    bind(descriptor, {"name": "Ana"})            → ["Ana", "0"]
    bind(descriptor, {"name": "", "age": "31"})  → ["World", "31"]

Values stay strings; converting them is the handler's business.
"""

from typing import List, Mapping

from .registry import HandlerDescriptor, ParameterBinding


def resolve(binding: ParameterBinding, query_params: Mapping[str, str]) -> str:
    """
    Value for one binding.

    A missing key and an empty value both fall back to the default.
    A binding without a query name resolves to "".
    """
    if binding.query_name is None:
        return ""
    value = query_params.get(binding.query_name)
    if not value:
        return binding.default_value
    return value


def bind(descriptor: HandlerDescriptor, query_params: Mapping[str, str]) -> List[str]:
    """Argument list for descriptor, one string per binding, in order."""
    return [resolve(binding, query_params) for binding in descriptor.parameter_bindings]
