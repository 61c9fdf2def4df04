"""OCPP 1.6 action names and the feature profiles they belong to."""

from __future__ import annotations

from enum import Enum


class FeatureProfile(str, Enum):
    CORE = "Core"
    FIRMWARE_MANAGEMENT = "FirmwareManagement"
    LOCAL_AUTH_LIST_MANAGEMENT = "LocalAuthListManagement"
    RESERVATION = "Reservation"
    SMART_CHARGING = "SmartCharging"
    REMOTE_TRIGGER = "RemoteTrigger"


class Action(str, Enum):
    """Closed set of OCPP 1.6 action names a handler can be registered for."""

    AUTHORIZE = "Authorize"
    BOOT_NOTIFICATION = "BootNotification"
    CHANGE_AVAILABILITY = "ChangeAvailability"
    CHANGE_CONFIGURATION = "ChangeConfiguration"
    CLEAR_CACHE = "ClearCache"
    DATA_TRANSFER = "DataTransfer"
    GET_CONFIGURATION = "GetConfiguration"
    HEARTBEAT = "Heartbeat"
    METER_VALUES = "MeterValues"
    REMOTE_START_TRANSACTION = "RemoteStartTransaction"
    REMOTE_STOP_TRANSACTION = "RemoteStopTransaction"
    RESET = "Reset"
    START_TRANSACTION = "StartTransaction"
    STATUS_NOTIFICATION = "StatusNotification"
    STOP_TRANSACTION = "StopTransaction"
    UNLOCK_CONNECTOR = "UnlockConnector"
    DIAGNOSTICS_STATUS_NOTIFICATION = "DiagnosticsStatusNotification"
    FIRMWARE_STATUS_NOTIFICATION = "FirmwareStatusNotification"
    GET_DIAGNOSTICS = "GetDiagnostics"
    UPDATE_FIRMWARE = "UpdateFirmware"
    GET_LOCAL_LIST_VERSION = "GetLocalListVersion"
    SEND_LOCAL_LIST = "SendLocalList"
    CANCEL_RESERVATION = "CancelReservation"
    RESERVE_NOW = "ReserveNow"
    CLEAR_CHARGING_PROFILE = "ClearChargingProfile"
    GET_COMPOSITE_SCHEDULE = "GetCompositeSchedule"
    SET_CHARGING_PROFILE = "SetChargingProfile"
    TRIGGER_MESSAGE = "TriggerMessage"

    @classmethod
    def lookup(cls, name: str) -> "Action | None":
        """Return the member named ``name`` on the wire, if any."""

        try:
            return cls(name)
        except ValueError:
            return None

    @property
    def profile(self) -> FeatureProfile:
        return _PROFILES.get(self, FeatureProfile.CORE)


_PROFILES = {
    Action.DIAGNOSTICS_STATUS_NOTIFICATION: FeatureProfile.FIRMWARE_MANAGEMENT,
    Action.FIRMWARE_STATUS_NOTIFICATION: FeatureProfile.FIRMWARE_MANAGEMENT,
    Action.GET_DIAGNOSTICS: FeatureProfile.FIRMWARE_MANAGEMENT,
    Action.UPDATE_FIRMWARE: FeatureProfile.FIRMWARE_MANAGEMENT,
    Action.GET_LOCAL_LIST_VERSION: FeatureProfile.LOCAL_AUTH_LIST_MANAGEMENT,
    Action.SEND_LOCAL_LIST: FeatureProfile.LOCAL_AUTH_LIST_MANAGEMENT,
    Action.CANCEL_RESERVATION: FeatureProfile.RESERVATION,
    Action.RESERVE_NOW: FeatureProfile.RESERVATION,
    Action.CLEAR_CHARGING_PROFILE: FeatureProfile.SMART_CHARGING,
    Action.GET_COMPOSITE_SCHEDULE: FeatureProfile.SMART_CHARGING,
    Action.SET_CHARGING_PROFILE: FeatureProfile.SMART_CHARGING,
    Action.TRIGGER_MESSAGE: FeatureProfile.REMOTE_TRIGGER,
}
