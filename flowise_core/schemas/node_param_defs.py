"""Register editable fields for every node category the modifier knows."""

from flowise_core.schemas.node_fields import CategoryFields, register_category_fields
from flowise_core.schemas.parameters import ParameterSpec, ParamType

CHAT_MODEL_OPTIONS = (
    "gpt-4o-mini",
    "gpt-4o",
    "gpt-4",
    "gpt-4-turbo",
    "gpt-3.5-turbo",
    "claude-3-haiku",
    "claude-3-sonnet",
)

# ── Models ────────────────────────────────────────────────────────────────────

register_category_fields(CategoryFields(
    category="Chat Models",
    fields=[
        ParameterSpec(
            name="modelName",
            label="Model",
            type=ParamType.SELECT,
            description="Language model to use",
            required=True,
            options=CHAT_MODEL_OPTIONS,
        ),
        ParameterSpec(
            name="temperature",
            label="Temperature",
            type=ParamType.NUMBER,
            description="Controls response randomness",
            default_value=0.7,
            min=0,
            max=2,
            step=0.1,
        ),
        ParameterSpec(
            name="maxTokens",
            label="Max Tokens",
            type=ParamType.NUMBER,
            description="Maximum number of tokens in the response",
            default_value=1000,
            min=1,
            max=128000,
            validator=lambda v: float(v).is_integer(),
        ),
        ParameterSpec(
            name="streaming",
            label="Streaming",
            type=ParamType.BOOLEAN,
            description="Stream responses token by token",
            default_value=False,
        ),
        ParameterSpec(
            name="allowImageUploads",
            label="Allow Image Uploads",
            type=ParamType.BOOLEAN,
            description="Accept images as input",
            default_value=False,
        ),
    ],
))

register_category_fields(CategoryFields(
    category="LLM",
    fields=[
        ParameterSpec(
            name="model",
            label="LLM Model",
            type=ParamType.SELECT,
            description="Language model for the LLM node",
            required=True,
            options=CHAT_MODEL_OPTIONS,
        ),
    ],
    value_aliases={"model": "llmModel"},
))

# ── Prompting and memory ──────────────────────────────────────────────────────

register_category_fields(CategoryFields(
    category="Prompts",
    fields=[
        ParameterSpec(
            name="template",
            label="Template",
            type=ParamType.STRING,
            description="Prompt template",
            required=True,
            validator=lambda v: bool(v.strip()),
        ),
    ],
))

register_category_fields(CategoryFields(
    category="Memory",
    fields=[
        ParameterSpec(
            name="memoryType",
            label="Memory Type",
            type=ParamType.SELECT,
            description="Kind of conversation memory",
            options=("Buffer Memory", "Conversation Buffer Memory", "Conversation Summary Memory"),
        ),
        ParameterSpec(
            name="bufferSize",
            label="Buffer Size",
            type=ParamType.NUMBER,
            description="Maximum number of messages kept in memory",
            default_value=10,
            min=1,
            max=1000,
            validator=lambda v: float(v).is_integer(),
        ),
    ],
))

# ── Tools and retrieval ───────────────────────────────────────────────────────

register_category_fields(CategoryFields(
    category="Tools",
    fields=[
        ParameterSpec(
            name="tool",
            label="Tool",
            type=ParamType.SELECT,
            description="Tool made available to the agent",
            options=("Search", "Calculator", "Weather", "Wikipedia", "Web Scraping"),
        ),
    ],
    value_aliases={"tool": "toolAgentflowSelectedTool"},
))

register_category_fields(CategoryFields(
    category="Document Stores",
    fields=[
        ParameterSpec(
            name="documentStore",
            label="Document Store",
            type=ParamType.SELECT,
            description="Vector database backing the documents",
            options=("Pinecone", "Chroma", "FAISS", "Weaviate", "Qdrant"),
        ),
    ],
))

register_category_fields(CategoryFields(
    category="Embeddings",
    fields=[
        ParameterSpec(
            name="embeddingsModel",
            label="Embeddings Model",
            type=ParamType.SELECT,
            description="Model used to compute embeddings",
            options=("text-embedding-ada-002", "text-embedding-3-small", "text-embedding-3-large"),
        ),
    ],
    value_aliases={"embeddingsModel": "modelName"},
))

register_category_fields(CategoryFields(
    category="Text Splitters",
    fields=[
        ParameterSpec(
            name="chunkSize",
            label="Chunk Size",
            type=ParamType.NUMBER,
            description="Maximum size of each text chunk",
            default_value=1000,
            min=1,
            max=100000,
            validator=lambda v: float(v).is_integer(),
        ),
        ParameterSpec(
            name="chunkOverlap",
            label="Chunk Overlap",
            type=ParamType.NUMBER,
            description="Overlap between consecutive chunks",
            default_value=200,
            min=0,
            max=100000,
            validator=lambda v: float(v).is_integer(),
        ),
    ],
))
