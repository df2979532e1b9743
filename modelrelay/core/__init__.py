# Core modules
from .conversation import ConversationTurn, estimate_tokens, to_openai_messages
from .directives import DirectiveParser, apply_directives
from .context_assembler import ContextAssembler, FileEntry, FolderEntry
from .prompts import PromptLibrary, PromptOptions

__all__ = [
    "ConversationTurn",
    "estimate_tokens",
    "to_openai_messages",
    "DirectiveParser",
    "apply_directives",
    "ContextAssembler",
    "FileEntry",
    "FolderEntry",
    "PromptLibrary",
    "PromptOptions",
]
