"""
Root-level configuration files of the generated service.

Everything lands in the project root except the Husky hooks (``.husky/``).
The files are described as a structure and written by the same materializer
as the source tree; hook scripts are chmod'ed afterwards.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from string import Template
from typing import Any

from backend_scaffold.metadata import DEFAULTS, ProjectMetadata
from backend_scaffold.structure import INLINE_FILES_KEY, FileSpec, Node, group, inline, materialize

logger = logging.getLogger(__name__)

EXECUTABLES = {
    ".husky/commit-msg",
    ".husky/pre-commit",
}

EXECUTABLE_MODE = 0o755

PATH_ALIASES = (
    "config",
    "entities",
    "services",
    "controllers",
    "middlewares",
    "utils",
    "types",
    "repositories",
    "validators",
    "exceptions",
    "decorators",
)

SCRIPTS = {
    "dev": "ts-node-dev --respawn --transpile-only --exit-child src/server.ts",
    "dev:watch": "nodemon --watch src --ext ts --exec ts-node src/server.ts",
    "build": "rimraf dist && tsc",
    "start": "node dist/server.js",
    "start:prod": "cross-env NODE_ENV=production node dist/server.js",
    "typeorm": "typeorm-ts-node-commonjs",
    "migration:generate": "npm run typeorm -- migration:generate -d src/database/data-source.ts",
    "migration:create": "npm run typeorm -- migration:create",
    "migration:run": "npm run typeorm -- migration:run -d src/database/data-source.ts",
    "migration:revert": "npm run typeorm -- migration:revert -d src/database/data-source.ts",
    "migration:show": "npm run typeorm -- migration:show -d src/database/data-source.ts",
    "seed": "ts-node src/scripts/seed.ts",
    "db:drop": "npm run typeorm -- schema:drop -d src/database/data-source.ts",
    "db:sync": "npm run typeorm -- schema:sync -d src/database/data-source.ts",
    "db:reset": "npm run db:drop && npm run migration:run && npm run seed",
    "test": "cross-env NODE_ENV=test jest --coverage --verbose",
    "test:watch": "cross-env NODE_ENV=test jest --watch",
    "test:unit": "cross-env NODE_ENV=test jest --testPathPattern=tests/unit",
    "test:integration": "cross-env NODE_ENV=test jest --testPathPattern=tests/integration",
    "test:e2e": "cross-env NODE_ENV=test jest --testPathPattern=tests/e2e",
    "test:coverage": "cross-env NODE_ENV=test jest --coverage --coverageDirectory=coverage",
    "lint": "eslint . --ext .ts",
    "lint:fix": "eslint . --ext .ts --fix",
    "format": 'prettier --write "src/**/*.ts" "tests/**/*.ts"',
    "format:check": 'prettier --check "src/**/*.ts" "tests/**/*.ts"',
    "type-check": "tsc --noEmit",
    "validate": "npm run lint && npm run format:check && npm run type-check",
    "clean": "rimraf dist coverage logs/*.log",
    "prebuild": "npm run clean",
}

DEPENDENCIES = {
    "@types/bcrypt": "^6.0.0",
    "@types/cors": "^2.8.19",
    "@types/express": "^5.0.6",
    "@types/jsonwebtoken": "^9.0.10",
    "@types/node": "^24.10.1",
    "@types/swagger-jsdoc": "^6.0.4",
    "@types/swagger-ui-express": "^4.1.8",
    "@types/uuid": "^11.0.0",
    "bcrypt": "^6.0.0",
    "bull": "^4.16.5",
    "compression": "^1.8.1",
    "cors": "^2.8.5",
    "date-fns": "^4.1.0",
    "dotenv": "^17.2.3",
    "express": "^5.2.1",
    "express-rate-limit": "^8.2.1",
    "helmet": "^8.1.0",
    "jsonwebtoken": "^9.0.2",
    "node-cron": "^4.2.1",
    "pg": "^8.16.3",
    "reflect-metadata": "^0.2.2",
    "swagger-jsdoc": "^6.2.8",
    "swagger-ui-express": "^5.0.1",
    "typeorm": "^0.3.28",
    "typescript": "^5.9.3",
    "uuid": "^13.0.0",
    "winston": "^3.18.3",
    "winston-daily-rotate-file": "^5.0.0",
    "zod": "^4.1.13",
}

DEV_DEPENDENCIES = {
    "@faker-js/faker": "^10.1.0",
    "@types/compression": "^1.8.1",
    "@types/jest": "^30.0.0",
    "@types/node-cron": "^3.0.11",
    "@types/supertest": "^6.0.3",
    "@typescript-eslint/eslint-plugin": "^8.48.1",
    "@typescript-eslint/parser": "^8.48.1",
    "cross-env": "^10.1.0",
    "eslint": "^9.39.1",
    "eslint-config-prettier": "^10.1.8",
    "eslint-plugin-prettier": "^5.1.3",
    "jest": "^30.2.0",
    "nodemon": "^3.1.11",
    "prettier": "^3.7.4",
    "rimraf": "^6.1.2",
    "supertest": "^7.1.4",
    "ts-jest": "^29.4.6",
    "ts-node": "^10.9.2",
    "ts-node-dev": "^2.0.0",
    "tsconfig-paths": "^4.2.0",
}

GITHOOKS_DEV_DEPENDENCIES = {
    "@commitlint/cli": "^20.1.0",
    "@commitlint/config-conventional": "^20.0.0",
    "husky": "^9.1.7",
    "lint-staged": "^16.2.7",
}


def package_json(metadata: ProjectMetadata, min_node: int = DEFAULTS["min_node"]) -> dict[str, Any]:
    scripts = dict(SCRIPTS)
    dev_deps = dict(DEV_DEPENDENCIES)
    if metadata.githooks:
        scripts["prepare"] = "husky install"
        dev_deps.update(GITHOOKS_DEV_DEPENDENCIES)

    return {
        "name": metadata.name,
        "version": metadata.version,
        "description": metadata.description,
        "author": metadata.author,
        "license": metadata.license,
        "main": "dist/server.js",
        "scripts": scripts,
        "dependencies": dict(DEPENDENCIES),
        "devDependencies": dict(sorted(dev_deps.items())),
        "engines": {
            "node": f">={min_node}.0.0",
            "npm": ">=9.0.0",
        },
    }


TSCONFIG = {
    "include": ["src/**/*"],
    "exclude": ["node_modules", "dist", "tests", "**/*.spec.ts", "**/*.test.ts"],
    "compilerOptions": {
        "target": "ES2022",
        "module": "commonjs",
        "lib": ["ES2022"],
        "outDir": "./dist",
        "rootDir": "./src",
        "removeComments": True,
        "strict": True,
        "esModuleInterop": True,
        "skipLibCheck": True,
        "forceConsistentCasingInFileNames": True,
        "moduleResolution": "node",
        "resolveJsonModule": True,
        "experimentalDecorators": True,
        "emitDecoratorMetadata": True,
        "strictPropertyInitialization": False,
        "sourceMap": True,
        "declaration": True,
        "declarationMap": True,
        "incremental": True,
        "noImplicitAny": True,
        "noImplicitThis": True,
        "alwaysStrict": True,
        "noUnusedLocals": True,
        "noUnusedParameters": True,
        "noImplicitReturns": True,
        "noFallthroughCasesInSwitch": True,
        "baseUrl": ".",
        "paths": {f"@{alias}/*": [f"src/{alias}/*"] for alias in PATH_ALIASES},
    },
}

# type-checks tests too; used by eslint and the editor, never by the build
TSCONFIG_DEV = {
    "extends": "./tsconfig.json",
    "include": ["src/**/*", "tests/**/*"],
    "exclude": ["node_modules", "dist"],
    "compilerOptions": {
        "rootDir": ".",
        "noEmit": True,
        "types": ["node", "jest"],
    },
}

PRETTIER_CONFIG = {
    "semi": True,
    "trailingComma": "es5",
    "singleQuote": True,
    "printWidth": 100,
    "tabWidth": 2,
    "useTabs": False,
    "arrowParens": "always",
    "bracketSpacing": True,
    "endOfLine": "lf",
    "quoteProps": "as-needed",
}

NODEMON_CONFIG = {
    "watch": ["src"],
    "ext": "ts,json",
    "ignore": ["src/**/*.spec.ts", "src/**/*.test.ts", "node_modules"],
    "exec": "ts-node -r tsconfig-paths/register src/server.ts",
    "env": {"NODE_ENV": "development"},
    "restartable": "rs",
    "delay": 1000,
}

_MODULE_NAME_MAPPER = "\n".join(
    f"    '^@{alias}/(.*)$': '<rootDir>/src/{alias}/$1'," for alias in PATH_ALIASES
)

JEST_CONFIG = r"""module.exports = {
  preset: 'ts-jest',
  testEnvironment: 'node',
  roots: ['<rootDir>/tests', '<rootDir>/src'],
  testMatch: ['**/__tests__/**/*.ts', '**/?(*.)+(spec|test).ts'],
  transform: {
    '^.+\.ts$': 'ts-jest',
  },
  collectCoverageFrom: [
    'src/**/*.ts',
    '!src/**/*.d.ts',
    '!src/server.ts',
    '!src/types/**',
    '!src/database/migrations/**',
    '!src/database/seeds/**',
  ],
  coverageThreshold: {
    global: {
      branches: 70,
      functions: 70,
      lines: 70,
      statements: 70,
    },
  },
  coverageDirectory: 'coverage',
  coverageReporters: ['text', 'lcov', 'html'],
  moduleNameMapper: {
%(mapper)s
  },
  setupFilesAfterEnv: ['<rootDir>/tests/setup.ts'],
  testTimeout: 30000,
  verbose: true,
  clearMocks: true,
  resetMocks: true,
  restoreMocks: true,
};
""" % {"mapper": _MODULE_NAME_MAPPER}

ESLINT_CONFIG = """\
module.exports = {
  parser: '@typescript-eslint/parser',
  parserOptions: {
    ecmaVersion: 2022,
    sourceType: 'module',
    project: './tsconfig.dev.json',
  },
  plugins: ['@typescript-eslint', 'prettier'],
  extends: [
    'eslint:recommended',
    'plugin:@typescript-eslint/recommended',
    'plugin:@typescript-eslint/recommended-requiring-type-checking',
    'prettier',
    'plugin:prettier/recommended',
  ],
  root: true,
  env: {
    node: true,
    jest: true,
    es2022: true,
  },
  ignorePatterns: ['eslint.config.js', 'jest.config.js', 'dist', 'node_modules', 'coverage'],
  rules: {
    // TypeScript rules
    '@typescript-eslint/interface-name-prefix': 'off',
    '@typescript-eslint/explicit-function-return-type': 'off',
    '@typescript-eslint/explicit-module-boundary-types': 'off',
    '@typescript-eslint/no-explicit-any': 'warn',
    '@typescript-eslint/no-unused-vars': [
      'error',
      {
        argsIgnorePattern: '^_',
        varsIgnorePattern: '^_',
        caughtErrorsIgnorePattern: '^_',
      },
    ],
    '@typescript-eslint/no-floating-promises': 'error',
    '@typescript-eslint/no-misused-promises': 'error',
    '@typescript-eslint/await-thenable': 'error',

    // General rules
    'no-console': ['warn', { allow: ['warn', 'error'] }],
    'no-debugger': 'error',
    'no-duplicate-imports': 'error',
    'no-unused-expressions': 'error',
    'prefer-const': 'error',
    'no-var': 'error',

    // Prettier
    'prettier/prettier': ['error', { endOfLine: 'auto' }],
  },
};
"""

ENV_EXAMPLE = """\
# Environment
NODE_ENV=development

# Server
PORT=3000
API_PREFIX=/api
API_VERSION=V1

# Database
DB_HOST=localhost
DB_PORT=5432
DB_USER=postgres
DB_PASSWORD=postgres
DB_NAME=${db_name}

# JWT
JWT_SECRET=your-super-secret-jwt-key-change-this-in-production
JWT_EXPIRES_IN=24h
JWT_REFRESH_SECRET=your-refresh-token-secret
JWT_REFRESH_EXPIRES_IN=7d

# Rate Limiting
RATE_LIMIT_WINDOW_MS=900000
RATE_LIMIT_MAX_REQUESTS=100

# Logging
LOG_LEVEL=debug
LOG_FILE_ERROR=logs/error.log
LOG_FILE_COMBINED=logs/combined.log
LOG_FILE_ACCESS=logs/access.log

# CORS
CORS_ORIGIN=http://localhost:3000,http://localhost:4200
CORS_CREDENTIALS=true

# Encryption
ENCRYPTION_KEY=your-encryption-key-32-characters
ENCRYPTION_ALGORITHM=aes-256-cbc

# Pagination
DEFAULT_PAGE_SIZE=20
MAX_PAGE_SIZE=100

# File Upload
MAX_FILE_SIZE=5242880
ALLOWED_FILE_TYPES=image/jpeg,image/png,application/pdf

# Feature Flags
ENABLE_SWAGGER=true
ENABLE_RATE_LIMITING=true
ENABLE_CACHING=true
ENABLE_AUDIT_LOG=true
"""

GITIGNORE = """\
# Dependencies
node_modules/
package-lock.json
yarn.lock
pnpm-lock.yaml

# Build outputs
dist/
build/
*.tsbuildinfo

# Environment variables
.env
.env.local
.env.development
.env.test
.env.production

# Logs
logs/
*.log
npm-debug.log*
yarn-debug.log*
yarn-error.log*
lerna-debug.log*
pids
*.pid
*.seed
*.pid.lock

# Testing
coverage/
.nyc_output/
*.lcov

# IDEs and editors
.vscode/
.idea/
*.swp
*.swo
*~
.DS_Store
*.sublime-workspace
*.sublime-project

# OS
Thumbs.db
.AppleDouble
.LSOverride

# Temporary files
tmp/
temp/
*.tmp
.cache/

# Database
*.sqlite
*.db

# Docker
docker-compose.override.yml

# Misc
.husky/_
"""

# ---------------------- docker ----------------------

DOCKERFILE = """\
FROM node:${node_major}-alpine AS build
WORKDIR /app
COPY package*.json ./
RUN npm ci
COPY tsconfig.json ./
COPY src ./src
RUN npm run build

FROM node:${node_major}-alpine
WORKDIR /app
ENV NODE_ENV=production
COPY package*.json ./
RUN npm ci --omit=dev --ignore-scripts
COPY --from=build /app/dist ./dist
EXPOSE 3000
USER node
CMD ["node", "dist/server.js"]
"""

DOCKER_COMPOSE = """\
services:
  api:
    build: .
    container_name: ${name}-api
    env_file: .env
    environment:
      DB_HOST: db
    ports:
      - "3000:3000"
    depends_on:
      - db

  db:
    image: postgres:16-alpine
    container_name: ${name}-db
    environment:
      POSTGRES_USER: postgres
      POSTGRES_PASSWORD: postgres
      POSTGRES_DB: ${db_name}
    ports:
      - "5432:5432"
    volumes:
      - pgdata:/var/lib/postgresql/data

volumes:
  pgdata:
"""

DOCKERIGNORE = """\
node_modules
dist
coverage
logs
.git
.husky
.env
.env.*
!.env.example
Dockerfile
docker-compose*.yml
"""

# ---------------------- git hooks ----------------------

COMMITLINT_CONFIG = """\
module.exports = {
  extends: ['@commitlint/config-conventional'],
};
"""

LINT_STAGED_CONFIG = """\
module.exports = {
  '*.ts': ['eslint --fix', 'prettier --write'],
  '*.{json,md,yml}': ['prettier --write'],
};
"""

HUSKY_COMMIT_MSG = """\
#!/usr/bin/env sh
npx --no -- commitlint --edit "$1"
"""

HUSKY_PRE_COMMIT = """\
#!/usr/bin/env sh
npx lint-staged
"""


def _json(data: dict[str, Any]) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def _render(text: str, vars: dict[str, Any]) -> str:
    return Template(text).safe_substitute(vars)


def config_structure(metadata: ProjectMetadata, min_node: int = DEFAULTS["min_node"]) -> dict[str, Node]:
    """Structure of the root-level config files for ``metadata``."""
    vars = metadata.as_vars() | {
        "db_name": metadata.name.replace("-", "_"),
        "node_major": str(min_node),
    }

    root = [
        FileSpec("package.json", _json(package_json(metadata, min_node))),
        FileSpec("tsconfig.json", _json(TSCONFIG)),
        FileSpec("tsconfig.dev.json", _json(TSCONFIG_DEV)),
        FileSpec("nodemon.json", _json(NODEMON_CONFIG)),
        FileSpec(".prettierrc", _json(PRETTIER_CONFIG)),
        FileSpec("jest.config.js", JEST_CONFIG),
        FileSpec("eslint.config.js", ESLINT_CONFIG),
        FileSpec(".env.example", _render(ENV_EXAMPLE, vars)),
        FileSpec(".gitignore", GITIGNORE),
    ]

    if metadata.docker:
        root += [
            FileSpec("Dockerfile", _render(DOCKERFILE, vars)),
            FileSpec("docker-compose.yml", _render(DOCKER_COMPOSE, vars)),
            FileSpec(".dockerignore", DOCKERIGNORE),
        ]

    struct: dict[str, Node] = {}
    if metadata.githooks:
        root += [
            FileSpec("commitlint.config.js", COMMITLINT_CONFIG),
            FileSpec("lint-staged.config.js", LINT_STAGED_CONFIG),
        ]
        struct[".husky"] = group(
            FileSpec("commit-msg", HUSKY_COMMIT_MSG),
            FileSpec("pre-commit", HUSKY_PRE_COMMIT),
        )

    struct[INLINE_FILES_KEY] = inline(*root)
    return struct


def mark_executables(project_dir: Path) -> None:
    for rel in sorted(EXECUTABLES):
        script = project_dir / rel
        if script.exists():
            script.chmod(EXECUTABLE_MODE)
            logger.debug("chmod %o %s", EXECUTABLE_MODE, script)


def write_config_files(
    project_dir: Path,
    metadata: ProjectMetadata,
    min_node: int = DEFAULTS["min_node"],
) -> None:
    materialize(project_dir, config_structure(metadata, min_node))
    mark_executables(project_dir)
