# src/flowblob/plugins/azure/blob_activity.py
"""Azure Blob Storage activity for workflow runtimes.

Thin shim between a host context and the library in operations.py:
settings and inputs are read from the context, validated once, executed,
and the outputs published back to the context.

Failure contract:
    - Missing/invalid settings -> EvalResult(done=True, error=PluginConfigError),
      no network call
    - Credential, provider, local I/O failures -> EvalResult(done=True, error=ActivityError)
    - Anything else is a bug and propagates
"""

from typing import Any

from flowblob.contracts import ActivityError, ActivityMetadata, EvalResult, FieldSpec
from flowblob.core.logging import bound_context, get_logger
from flowblob.plugins.azure.operations import (
    BlobActivityConfig,
    BlobActivityInput,
    Method,
    configure,
    execute,
)
from flowblob.plugins.base import BaseActivity
from flowblob.plugins.config_base import ActivityConfigError, PluginConfigError
from flowblob.plugins.context import ActivityContext

logger = get_logger(__name__)

AZURE_STORAGE_ACCOUNT = "azure_storage_account"
AZURE_STORAGE_ACCESS_KEY = "azure_storage_access_key"
METHOD = "method"
CONTAINER_NAME = "container_name"

INPUT_FILE = "file"
INPUT_DATA = "data"
OUTPUT_RESULT = "result"

AZURE_BLOB_METADATA = ActivityMetadata(
    name="azure_blob",
    version="1.0.0",
    title="Azure Blob Storage",
    settings=(
        FieldSpec(AZURE_STORAGE_ACCOUNT, required=True),
        FieldSpec(AZURE_STORAGE_ACCESS_KEY, required=True),
        FieldSpec(METHOD, required=True, allowed=tuple(m.value for m in Method)),
        FieldSpec(CONTAINER_NAME, required=True),
        FieldSpec("account_url"),
        FieldSpec("page_size", type="integer"),
    ),
    inputs=(
        FieldSpec(INPUT_FILE),
        FieldSpec(INPUT_DATA),
    ),
    outputs=(FieldSpec(OUTPUT_RESULT, type="object"),),
)


class AzureBlobActivity(BaseActivity):
    """Upload a file as a block blob or list the blobs in a container.

    Settings may be bound at construction (validated immediately) or read
    from the context on the first evaluation. Either way they are validated
    once and reused for every later evaluation of this instance.

    Example:
        activity = AzureBlobActivity()
        ctx = InMemoryActivityContext(
            settings={
                "azure_storage_account": "mystorageaccount",
                "azure_storage_access_key": key,
                "method": "list",
                "container_name": "samples",
            },
        )
        outcome = activity.evaluate(ctx)
        ctx.outputs["result"]  # {blob name: BlobDescriptor}
    """

    name = "azure_blob"
    plugin_version = "1.0.0"
    declared_metadata = AZURE_BLOB_METADATA

    def __init__(
        self,
        metadata: ActivityMetadata | None = None,
        settings: dict[str, Any] | None = None,
    ) -> None:
        """Bind the activity.

        Raises:
            PluginConfigError: If settings are given and invalid.
        """
        super().__init__(metadata)
        self._config: BlobActivityConfig | None = configure(settings) if settings is not None else None

    @property
    def config(self) -> BlobActivityConfig | None:
        """Validated settings, or None until resolved."""
        return self._config

    def evaluate(self, ctx: ActivityContext) -> EvalResult:
        with bound_context(activity=self.name):
            try:
                config = self._resolve_config(ctx)
                with bound_context(method=str(config.method), container=config.container_name):
                    result = execute(config, self._read_inputs(ctx, config))
            except PluginConfigError as e:
                logger.error("Invalid activity configuration", error=str(e), fields=list(e.fields))
                return EvalResult.failure(e)
            except ActivityError as e:
                logger.error("Evaluation failed", **e.to_payload())
                return EvalResult.failure(e)

            for output_name, value in result.outputs.items():
                ctx.set_output(output_name, value)
            return EvalResult.success()

    def _resolve_config(self, ctx: ActivityContext) -> BlobActivityConfig:
        """Read declared settings from the context, validating on first use.

        Raises:
            ActivityConfigError: If a required setting is absent.
            PluginConfigError: If a setting cannot be used (e.g. not a string).
        """
        if self._config is not None:
            return self._config

        required = set(self._metadata.required_settings)
        settings: dict[str, Any] = {}
        for setting_name in self._metadata.setting_names:
            value, exists = ctx.get_setting(setting_name)
            if not exists:
                if setting_name in required:
                    raise ActivityConfigError(setting_name)
                continue
            settings[setting_name] = value

        self._config = configure(settings)
        return self._config

    def _read_inputs(self, ctx: ActivityContext, config: BlobActivityConfig) -> BlobActivityInput:
        if config.method is not Method.UPLOAD:
            return BlobActivityInput()
        return BlobActivityInput.from_dict(
            {
                INPUT_FILE: ctx.get_input(INPUT_FILE),
                INPUT_DATA: ctx.get_input(INPUT_DATA),
            }
        )
