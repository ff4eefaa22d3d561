"""MQTT-backed host runtime for bravia2mqtt."""

import json
import logging
import signal
import sys
import threading
import time
from typing import Any, Iterable, Optional

import paho.mqtt.client as mqtt

from bravia_tvos.accessory import PlatformAccessory
from bravia_tvos.api import HostAPI
from bravia_tvos.config.constants import (
    DEFAULT_CLIENT_ID,
    DEFAULT_DISCOVERY_PREFIX,
    DEFAULT_MQTT_PORT,
    DEFAULT_RECONNECT_INTERVAL,
)
from bravia_tvos.storage import AccessoryCache

from .discovery import AVAILABILITY_TOPIC, generate_all_discoveries, remove_all_discoveries

logger = logging.getLogger(__name__)


class MQTTHostAPI(HostAPI):
    """Host runtime that announces accessories via Home Assistant MQTT discovery."""

    def __init__(self, config: dict, cache: Optional[AccessoryCache] = None):
        """Initialize the host.

        Args:
            config: Configuration dictionary (mqtt and options sections)
            cache: Accessory cache restored on launch
        """
        super().__init__(cache=cache)
        self.config = config
        self.running = False

        # MQTT client for broker (Home Assistant)
        self._broker_client: Optional[mqtt.Client] = None

        # Guards publishing from the paho network thread
        self._lock = threading.Lock()

    @property
    def discovery_prefix(self) -> str:
        return self.config.get("mqtt", {}).get("discovery_prefix") or DEFAULT_DISCOVERY_PREFIX

    @property
    def discovery_enabled(self) -> bool:
        return self.config.get("options", {}).get("discovery", True)

    def _setup_broker_client(self):
        """Set up MQTT broker client."""
        mqtt_config = self.config.get("mqtt", {})
        client_id = mqtt_config.get("client_id") or DEFAULT_CLIENT_ID

        self._broker_client = mqtt.Client(
            mqtt.CallbackAPIVersion.VERSION2,
            client_id=client_id,
            clean_session=True,
        )

        # Auth
        username = mqtt_config.get("username")
        password = mqtt_config.get("password")
        if username:
            self._broker_client.username_pw_set(username, password)

        # Callbacks
        self._broker_client.on_connect = self._on_broker_connect
        self._broker_client.on_disconnect = self._on_broker_disconnect

        # Last Will and Testament
        self._broker_client.will_set(AVAILABILITY_TOPIC, payload="offline", qos=1, retain=True)

    def _is_connected(self) -> bool:
        return self._broker_client is not None and self._broker_client.is_connected()

    def _on_broker_connect(self, client, userdata, flags, reason_code, properties=None):
        """Handle broker connection."""
        if reason_code.is_failure:
            logger.error("Failed to connect to MQTT broker: %s", reason_code)
            return

        logger.info("Connected to MQTT broker")

        with self._lock:
            accessories = self.accessories

        if self.discovery_enabled:
            self._publish_discovery(accessories)

        self._publish_availability(True)

    def _on_broker_disconnect(self, client, userdata, flags, reason_code, properties=None):
        """Handle broker disconnection."""
        logger.warning("Disconnected from MQTT broker: %s", reason_code)

    def _publish_availability(self, available: bool):
        """Publish availability to MQTT broker."""
        if self._is_connected():
            value = "online" if available else "offline"
            self._broker_client.publish(AVAILABILITY_TOPIC, value, qos=1, retain=True)
            logger.info("Availability: %s", value)

    def _publish_discovery(self, accessories: Iterable[PlatformAccessory]):
        """Publish Home Assistant discovery messages."""
        count = 0
        for accessory in accessories:
            for topic, payload in generate_all_discoveries(accessory, self.discovery_prefix):
                self._broker_client.publish(topic, json.dumps(payload), qos=0, retain=True)
                logger.debug("Discovery: %s", topic)
                count += 1

        logger.info("Published %d discovery messages", count)

    def _remove_discovery(self, accessories: Iterable[PlatformAccessory]):
        """Remove Home Assistant discovery messages."""
        for accessory in accessories:
            logger.info("Removing Home Assistant discovery for %s", accessory.display_name)
            for topic in remove_all_discoveries(accessory, self.discovery_prefix):
                self._broker_client.publish(topic, "", qos=0, retain=True)

    def register_platform_accessories(self, plugin_name: str, platform_name: str,
                                      accessories: Iterable[PlatformAccessory]):
        """Register accessories and announce them to the broker."""
        accessories = list(accessories)
        with self._lock:
            super().register_platform_accessories(plugin_name, platform_name, accessories)

        if self.discovery_enabled and self._is_connected():
            self._publish_discovery(accessories)

    def unregister_platform_accessories(self, plugin_name: str, platform_name: str,
                                        accessories: Iterable[PlatformAccessory]):
        """Unregister accessories and clear their discovery topics."""
        accessories = list(accessories)
        with self._lock:
            super().unregister_platform_accessories(plugin_name, platform_name, accessories)

        if self._is_connected():
            self._remove_discovery(accessories)

    def update_platform_accessories(self, accessories: Iterable[PlatformAccessory]):
        """Persist accessory changes and refresh their discovery payloads."""
        accessories = list(accessories)
        super().update_platform_accessories(accessories)

        if self.discovery_enabled and self._is_connected():
            self._publish_discovery(accessories)

    def start(self, platform: Any):
        """Connect to the broker and launch ``platform``."""
        logger.info("Starting bravia2mqtt host...")

        self.running = True
        self._setup_broker_client()

        # Connect to MQTT broker with retry
        mqtt_config = self.config.get("mqtt", {})
        host = mqtt_config.get("host", "localhost")
        port = mqtt_config.get("port") or DEFAULT_MQTT_PORT
        reconnect_interval = max(1, int(
            self.config.get("options", {}).get("reconnect_interval") or DEFAULT_RECONNECT_INTERVAL
        ))

        logger.info("Connecting to MQTT broker at %s:%s", host, port)
        broker_connected = False
        while self.running and not broker_connected:
            try:
                self._broker_client.connect(host, port, keepalive=60)
                self._broker_client.loop_start()
                broker_connected = True
            except OSError as e:
                logger.error("Failed to connect to MQTT broker: %s", e)
                logger.info("Retrying in %s seconds...", reconnect_interval)
                for _ in range(reconnect_interval):
                    if not self.running:
                        return
                    time.sleep(1)

        if not broker_connected:
            return

        self.launch(platform)

        logger.info("bravia2mqtt host started")

    def stop(self):
        """Stop the host."""
        if not self.running:
            return

        logger.info("Stopping bravia2mqtt host...")
        self.running = False

        self.shutdown()

        # Publish offline status
        self._publish_availability(False)

        # Disconnect broker
        if self._broker_client:
            try:
                self._broker_client.loop_stop()
                self._broker_client.disconnect()
            except OSError as e:
                logger.debug("Error while disconnecting from broker: %s", e)

        logger.info("bravia2mqtt host stopped")

    def run_forever(self, platform: Any):
        """Run the host until interrupted."""
        # Set up signal handlers
        def signal_handler(signum, frame):
            logger.info("Received signal %s", signum)
            self.stop()
            sys.exit(0)

        signal.signal(signal.SIGINT, signal_handler)
        signal.signal(signal.SIGTERM, signal_handler)

        self.start(platform)

        # Keep running
        try:
            while self.running:
                time.sleep(1)
        except KeyboardInterrupt:
            pass
        finally:
            self.stop()
