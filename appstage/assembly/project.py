from dataclasses import dataclass
from typing import Iterable

from appstage.assembly.paths import SourceSet, resolve_sources
from appstage.config import BuildConfig, package_name_problem
from appstage.descriptor import CORE_FIELDS, PackageDescriptor, read_descriptor
from appstage.errors import DescriptorError, MissingFieldError


@dataclass(frozen=True)
class Project:
    descriptor: PackageDescriptor
    name: str
    sources: SourceSet


def load_project(
    config: BuildConfig,
    *,
    required: Iterable[str] = CORE_FIELDS,
) -> Project:
    """Read the descriptor once and resolve the package name and source files."""

    descriptor = read_descriptor(config.resource_path, required=required)

    name = config.name or descriptor.binary
    if not name:
        raise MissingFieldError("binary", descriptor.source)
    if not config.name:
        problem = package_name_problem(name)
        if problem:
            raise DescriptorError(f"{problem} (<binary> in {descriptor.source})")

    sources = resolve_sources(
        config.project_root,
        resource_dir=config.resource_dir,
        binary_dir=config.binary_dir,
        name=name,
        app_id=descriptor.app_id,
    )

    return Project(descriptor=descriptor, name=name, sources=sources)
