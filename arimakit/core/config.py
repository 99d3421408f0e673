'''
Configuration management system for ARIMA Kit.

This module provides the configuration layer that controls the numerical
behaviour of the estimators (optimizer limits and tolerances, singularity
thresholds), the automatic order selection heuristic, and logging.

The configuration system follows a layered approach:
1. Default configurations built into the package
2. An optional JSON configuration file named by ``ARIMAKIT_CONFIG_FILE``
3. Environment variables of the form ``ARIMAKIT_<SECTION>_<OPTION>``
4. Runtime modifications through :func:`set_config`

Configuration is read-only during estimation; every estimator reads the
values it needs once at the start of a call.
'''

import json
import logging
import os
from dataclasses import asdict, dataclass, field, fields
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

from .exceptions import ConfigurationError
from .types import LogLevel

# Set up module-level logger
logger = logging.getLogger("arimakit.core.config")

# Constants for configuration paths and environment variables
CONFIG_ENV_PREFIX = "ARIMAKIT_"
CONFIG_FILE_ENV = "ARIMAKIT_CONFIG_FILE"
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigSection(Enum):
    """Enumeration of configuration sections."""
    NUMERICAL = "numerical"
    MODELS = "models"
    LOGGING = "logging"


@dataclass
class NumericalConfig:
    """
    Numerical configuration settings.

    Attributes:
        optimization_method: scipy.optimize.minimize method for CSS fitting
        max_iterations: Maximum number of optimizer iterations
        gradient_tol: Convergence tolerance on the projected gradient, per
            observation (the optimizer receives gradient_tol * nobs)
        function_tol: Relative objective-reduction tolerance
        finite_difference_step: Step for numerical gradients (None for automatic)
        singular_tol: Threshold below which a Durbin-Levinson denominator is zero
    """
    optimization_method: str = "L-BFGS-B"
    max_iterations: int = 200
    gradient_tol: float = 1e-6
    function_tol: float = 1e-13
    finite_difference_step: Optional[float] = None
    singular_tol: float = 1e-12


@dataclass
class ModelsConfig:
    """
    Model-specific configuration settings.

    Attributes:
        autofit_lags: Lag horizon used by the automatic order selection
        autofit_alpha: Significance level of the ACF/PACF confidence bounds
        ma_start: Starting value for every MA coefficient
        strict_optimization: Raise OptimizationError instead of returning a
            best-effort result when the optimizer does not converge
    """
    autofit_lags: int = 12
    autofit_alpha: float = 0.05
    ma_start: float = 1.0
    strict_optimization: bool = False


@dataclass
class LoggingConfig:
    """
    Logging configuration settings.

    Attributes:
        log_level: Level of the ``arimakit`` package logger
        log_format: Format string for log messages
        log_date_format: Format string for log message timestamps
        console_logging: Whether to attach a console handler
    """
    log_level: LogLevel = "WARNING"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    log_date_format: str = "%Y-%m-%d %H:%M:%S"
    console_logging: bool = True


@dataclass
class ArimaConfig:
    """
    Complete configuration for ARIMA Kit.

    Attributes:
        numerical: Numerical configuration settings
        models: Model-specific configuration settings
        logging: Logging configuration settings
    """
    numerical: NumericalConfig = field(default_factory=NumericalConfig)
    models: ModelsConfig = field(default_factory=ModelsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


class ConfigManager:
    """
    Configuration manager for ARIMA Kit.

    Holds the current configuration and applies file, environment and runtime
    overrides on top of the defaults.

    Attributes:
        _config: The current configuration object
        _initialized: Whether the configuration manager has been initialized
        _config_file: Path to the configuration file, if any
    """

    def __init__(self):
        """Initialize the configuration manager with default settings."""
        self._config = ArimaConfig()
        self._initialized = False
        self._config_file: Optional[Path] = None
        self._modified_keys = set()
        self._handler: Optional[logging.Handler] = None

    def initialize(self) -> None:
        """
        Initialize the configuration manager.

        This method:
        1. Loads the configuration file named by ARIMAKIT_CONFIG_FILE if present
        2. Applies environment variable overrides
        3. Validates the configuration
        4. Sets up logging based on configuration
        """
        if self._initialized:
            return

        self._load_config_file()
        self._apply_env_overrides()
        self._validate_config()
        self._setup_logging()

        self._initialized = True
        logger.debug("Configuration manager initialized")

    def _load_config_file(self) -> None:
        env_file = os.environ.get(CONFIG_FILE_ENV)
        if not env_file:
            return

        config_file = Path(env_file)
        if not config_file.exists():
            logger.warning(f"Configuration file {config_file} does not exist")
            return

        try:
            with open(config_file, 'r') as f:
                file_config = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(
                f"Failed to load configuration file: {e}",
                details=str(config_file)
            ) from e

        self._config_file = config_file
        self._update_from_dict(file_config)
        logger.debug(f"Loaded configuration from {config_file}")

    def _apply_env_overrides(self) -> None:
        """
        Apply environment variable overrides to the configuration.

        Variables are named ARIMAKIT_<SECTION>_<OPTION>, for example
        ARIMAKIT_NUMERICAL_MAX_ITERATIONS=500.
        """
        for env_var, value in os.environ.items():
            if not env_var.startswith(CONFIG_ENV_PREFIX) or env_var == CONFIG_FILE_ENV:
                continue

            key = env_var[len(CONFIG_ENV_PREFIX):]
            parts = key.lower().split('_', 1)
            if len(parts) != 2:
                continue

            section, option = parts
            try:
                ConfigSection(section)
            except ValueError:
                continue

            section_obj = getattr(self._config, section)
            if not hasattr(section_obj, option):
                continue

            typed_value = self._convert(section, option, value)
            setattr(section_obj, option, typed_value)
            logger.debug(f"Applied environment override: {env_var}={value}")

    def _convert(self, section: str, option: str, value: Any) -> Any:
        """Convert a raw (string) value to the type of the option's default."""
        section_obj = getattr(self._config, section)
        default_obj = type(section_obj)()
        default = getattr(default_obj, option)

        if not isinstance(value, str):
            return value
        if option == "log_level":
            return value.upper()

        try:
            if isinstance(default, bool):
                return value.lower() in ('true', 'yes', '1', 'y')
            if isinstance(default, int):
                return int(value)
            if isinstance(default, float) or (default is None and option == "finite_difference_step"):
                if default is None and value.lower() in ("none", ""):
                    return None
                return float(value)
        except ValueError as e:
            raise ConfigurationError(
                f"Invalid value {value!r} for {section}.{option}",
                section=section,
                option=option,
                details=str(e)
            ) from e
        return value

    def _update_from_dict(self, config_dict: Dict[str, Any]) -> None:
        for section, options in config_dict.items():
            if not isinstance(options, dict):
                raise ConfigurationError(
                    f"Configuration section {section!r} must be a mapping",
                    section=section
                )
            for option, value in options.items():
                self.set(section, option, value, validate=False)

    def _setup_logging(self) -> None:
        """
        Set up the ``arimakit`` package logger from the logging section.

        Only the handler installed by this manager is replaced; handlers that
        an application attached itself are left in place.
        """
        root_logger = logging.getLogger("arimakit")

        if self._handler is not None:
            root_logger.removeHandler(self._handler)
            self._handler = None

        root_logger.setLevel(getattr(logging, self._config.logging.log_level))

        if self._config.logging.console_logging:
            formatter = logging.Formatter(
                fmt=self._config.logging.log_format,
                datefmt=self._config.logging.log_date_format
            )
            self._handler = logging.StreamHandler()
            self._handler.setFormatter(formatter)
            root_logger.addHandler(self._handler)

    def _validate_config(self) -> None:
        numerical = self._config.numerical
        models = self._config.models
        log_cfg = self._config.logging

        if numerical.max_iterations < 1:
            raise ConfigurationError(
                "max_iterations must be at least 1",
                section="numerical", option="max_iterations"
            )
        for option in ("gradient_tol", "function_tol", "singular_tol"):
            if getattr(numerical, option) < 0:
                raise ConfigurationError(
                    f"{option} must be non-negative",
                    section="numerical", option=option
                )
        if numerical.finite_difference_step is not None and numerical.finite_difference_step <= 0:
            raise ConfigurationError(
                "finite_difference_step must be positive or None",
                section="numerical", option="finite_difference_step"
            )
        if models.autofit_lags < 1:
            raise ConfigurationError(
                "autofit_lags must be at least 1",
                section="models", option="autofit_lags"
            )
        if not 0.0 < models.autofit_alpha < 1.0:
            raise ConfigurationError(
                "autofit_alpha must be between 0 and 1",
                section="models", option="autofit_alpha"
            )
        if log_cfg.log_level not in _LOG_LEVELS:
            raise ConfigurationError(
                f"Invalid log level: {log_cfg.log_level}",
                section="logging", option="log_level",
                details=f"Valid levels: {', '.join(_LOG_LEVELS)}"
            )

    def _section(self, section: str) -> Any:
        try:
            ConfigSection(section)
        except ValueError:
            raise ConfigurationError(
                f"Unknown configuration section: {section}",
                section=section,
                details=f"Valid sections: {', '.join(s.value for s in ConfigSection)}"
            ) from None
        return getattr(self._config, section)

    def get(self, section: str, option: str, default: Any = None) -> Any:
        """
        Get a configuration value.

        Args:
            section: The configuration section
            option: The configuration option
            default: Value returned when the option does not exist

        Returns:
            The configuration value
        """
        self.initialize()
        section_obj = self._section(section)
        return getattr(section_obj, option, default)

    def set(self, section: str, option: str, value: Any, validate: bool = True) -> None:
        """
        Set a configuration value.

        Args:
            section: The configuration section
            option: The configuration option
            value: The new value
            validate: Whether to validate the configuration afterwards

        Raises:
            ConfigurationError: If the section or option is unknown or the value is invalid
        """
        section_obj = self._section(section)
        if option not in {f.name for f in fields(section_obj)}:
            raise ConfigurationError(
                f"Unknown configuration option: {section}.{option}",
                section=section,
                option=option
            )

        previous = getattr(section_obj, option)
        setattr(section_obj, option, self._convert(section, option, value))
        if validate:
            try:
                self._validate_config()
            except ConfigurationError:
                setattr(section_obj, option, previous)
                raise
            if section == ConfigSection.LOGGING.value:
                self._setup_logging()

        self._modified_keys.add(f"{section}.{option}")
        logger.debug(f"Set configuration {section}.{option}={value!r}")

    def reset(self, section: Optional[str] = None, option: Optional[str] = None) -> None:
        """
        Reset configuration to defaults.

        Args:
            section: Section to reset (None resets everything)
            option: Option within the section to reset (None resets the whole section)
        """
        if section is None:
            self._config = ArimaConfig()
            self._modified_keys.clear()
        else:
            section_obj = self._section(section)
            defaults = type(section_obj)()
            names = [option] if option is not None else [f.name for f in fields(section_obj)]
            for name in names:
                if not hasattr(defaults, name):
                    raise ConfigurationError(
                        f"Unknown configuration option: {section}.{name}",
                        section=section,
                        option=name
                    )
                setattr(section_obj, name, getattr(defaults, name))
                self._modified_keys.discard(f"{section}.{name}")
        self._setup_logging()

    def get_modified_options(self) -> List[str]:
        """Return the ``section.option`` keys changed at runtime."""
        return sorted(self._modified_keys)

    @property
    def config(self) -> ArimaConfig:
        """The current configuration object."""
        self.initialize()
        return self._config

    def to_dict(self) -> Dict[str, Any]:
        """Convert the configuration to a dictionary."""
        self.initialize()
        return asdict(self._config)


# Global configuration manager instance
_config_manager = ConfigManager()


def initialize_config() -> None:
    """Initialize the global configuration manager."""
    _config_manager.initialize()


def get_config(section: str, option: str, default: Any = None) -> Any:
    """Get a configuration value from the global configuration."""
    return _config_manager.get(section, option, default)


def set_config(section: str, option: str, value: Any) -> None:
    """Set a configuration value in the global configuration."""
    _config_manager.initialize()
    _config_manager.set(section, option, value)


def reset_config(section: Optional[str] = None, option: Optional[str] = None) -> None:
    """Reset the global configuration (or part of it) to defaults."""
    _config_manager.initialize()
    _config_manager.reset(section, option)


def get_config_manager() -> ConfigManager:
    """Return the global configuration manager."""
    return _config_manager


def get_numerical_config() -> NumericalConfig:
    """Return the numerical configuration section."""
    return _config_manager.config.numerical


def get_models_config() -> ModelsConfig:
    """Return the models configuration section."""
    return _config_manager.config.models


def get_logging_config() -> LoggingConfig:
    """Return the logging configuration section."""
    return _config_manager.config.logging


def to_dict() -> Dict[str, Any]:
    """Return the global configuration as a dictionary."""
    return _config_manager.to_dict()
