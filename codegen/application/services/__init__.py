"""Application services: pattern compiler, formatter, parser, config resolver, allocator.

Import from the submodules directly (e.g. codegen.application.services.code_parser);
DTOs depend on the compiler, so this package does not re-export to keep imports acyclic.
"""
