"""Constants: engine patterns, default plugin outputs, names."""

# Fired once the bundler has installed external modules into each function
HOOK_NAME = "after:webpack:package:packExternalModules"

LOG_PREFIX = "[prisma-generate]"

MANIFEST_FILE = "package.json"
DEPENDENCY_DIR = "node_modules"
STAGING_DIR = ".webpack"

# Package providing the generator CLI, installed only for the generate step
GENERATOR_PACKAGE = "prisma"

# Synthetic target when functions are not packaged individually
SERVICE_TARGET = "service"

# Where generator plugins drop their output, relative to node_modules
DEFAULT_OUTS = {
    "typegraphql-prisma": "@generated/type-graphql",
}

# Native binaries shipped by the generator; only the rhel builds are deployed
ENGINE_PATTERNS = (
    "node_modules/.prisma/client/query_engine*",
    "!node_modules/.prisma/client/query_engine-rhel*",

    "node_modules/prisma/query_engine*",
    "!node_modules/prisma/query_engine-rhel*",

    "node_modules/@prisma/engines/query_engine*",
    "!node_modules/@prisma/engines/query_engine-rhel*",

    "node_modules/@prisma/engines/migration-engine*",
    "!node_modules/@prisma/engines/migration-engine-rhel*",

    "node_modules/@prisma/engines/prisma-fmt*",
    "!node_modules/@prisma/engines/prisma-fmt-rhel*",

    "node_modules/@prisma/engines/introspection-engine*",
    "!node_modules/@prisma/engines/introspection-engine-rhel*",

    "node_modules/@prisma/internals/**/query_engine*",
    "node_modules/@prisma/internals/**/libquery_engine*",

    "**/.cache/**",
)
