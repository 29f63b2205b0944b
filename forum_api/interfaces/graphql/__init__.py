# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .context import AuthUseCases, GraphQLContext
from .schema import schema

__all__ = ["AuthUseCases", "GraphQLContext", "schema"]
