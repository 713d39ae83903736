"""
Build pipeline components for avbuild.

This module provides the pipeline implementation including:
- External process execution
- Artifact cache checking and source staging
- Configure (with signature-matched retry) and parallel make
- Link descriptor emission
- Binding generation
- Shim compilation and archiving
- Pipeline orchestration
"""

from .archive_creator import ArchiveCreator, ArchiveError
from .artifact_cache import ArtifactCacheChecker, CacheDecision
from .bindings import BindingGenerationError, BindingGenerator, BindingOptions, MissingHeadersError
from .compilation_executor import CompilationError, CompilationExecutor
from .configure_runner import (
    ConfigureError,
    ConfigureFlagBuilder,
    ConfigureRunner,
    FailureSignature,
    classify_configure_failure,
)
from .link_descriptor import Directive, DirectiveKind, DirectiveWriter, LinkDescriptorEmitter
from .make_runner import MakeError, MakeRunner
from .orchestrator import BuildOrchestrator, PipelineResult
from .process import ProcessResult, ProcessRunner
from .shim_compiler import ShimCompiler
from .source_stager import SourceStager, StagingError

__all__ = [
    'ArchiveCreator',
    'ArchiveError',
    'ArtifactCacheChecker',
    'CacheDecision',
    'BindingGenerationError',
    'BindingGenerator',
    'BindingOptions',
    'MissingHeadersError',
    'CompilationError',
    'CompilationExecutor',
    'ConfigureError',
    'ConfigureFlagBuilder',
    'ConfigureRunner',
    'FailureSignature',
    'classify_configure_failure',
    'Directive',
    'DirectiveKind',
    'DirectiveWriter',
    'LinkDescriptorEmitter',
    'MakeError',
    'MakeRunner',
    'BuildOrchestrator',
    'PipelineResult',
    'ProcessResult',
    'ProcessRunner',
    'ShimCompiler',
    'SourceStager',
    'StagingError',
]
