from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Profile:
    """
    Naming table for one managed application.

    Every environment variable the launcher reads is derived from
    `env_prefix`, so the pipeline itself never hard-codes a name.
    """

    app_name: str = "elasticsearch"
    env_prefix: str = "ES"
    main_class: str = "org.elasticsearch.bootstrap.Elasticsearch"
    path_home_property: str = "es.path.home"
    runtime_name: str = "java"
    options_name: str = "jvm.options"

    def var(self, suffix: str) -> str:
        return f"{self.env_prefix}_{suffix}"

    @property
    def include_name(self) -> str:
        return f"{self.app_name}.in.yml"

    @property
    def home_var(self) -> str:
        return self.var("HOME")

    @property
    def classpath_var(self) -> str:
        return self.var("CLASSPATH")

    @property
    def java_opts_var(self) -> str:
        return self.var("JAVA_OPTS")

    @property
    def options_file_var(self) -> str:
        return self.var("JVM_OPTIONS")

    @property
    def include_var(self) -> str:
        return self.var("INCLUDE")

    @property
    def startup_sleep_var(self) -> str:
        return self.var("STARTUP_SLEEP_TIME")

    @property
    def trace_var(self) -> str:
        return self.var("LAUNCH_TRACE")

    @property
    def dry_run_var(self) -> str:
        return self.var("LAUNCH_DRY_RUN")


DEFAULT_PROFILE = Profile()
