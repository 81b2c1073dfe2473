"""Azure plugin pack for flowblob.

Provides the azure_blob activity: upload a local file as a block blob, or
list the blobs in a container, using shared-key (account + access key) auth.

Activities are accessed via PluginManager, not direct imports:
    manager = PluginManager()
    manager.register_builtin_plugins()
    activity_cls = manager.get_activity_by_name("azure_blob")

The host-independent library lives in flowblob.plugins.azure.operations.
"""
