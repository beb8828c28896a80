"""Pydantic models for SeedForge API requests and responses."""

from __future__ import annotations

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# Pins are Daisy Seed pin numbers, but the schema also allows symbolic names
Pin = Union[int, str]


class EntryBase(BaseModel):
    """Common shape of a peripheral entry. Unknown fields are kept."""
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    labels: Optional[list[str]] = Field(None, description="Aliases bound to this entry's array slot")


# --- Peripheral entries ---

class AnalogControl(EntryBase):
    pin: Optional[Pin] = None
    flip: Optional[bool] = None
    invert: Optional[bool] = None


class CvInput(AnalogControl):
    pass


class CvOutput(EntryBase):
    pin: Optional[Pin] = None


class Encoder(EntryBase):
    pin_a: Optional[Pin] = None
    pin_b: Optional[Pin] = None
    pin_switch: Optional[Pin] = None


class GateInput(EntryBase):
    pin: Optional[Pin] = None


class GateOutput(EntryBase):
    pin: Optional[Pin] = None


class Led(EntryBase):
    pin: Optional[Pin] = None
    invert: Optional[bool] = None


class RgbLed(EntryBase):
    pin_r: Optional[Pin] = None
    pin_g: Optional[Pin] = None
    pin_b: Optional[Pin] = None
    invert: Optional[bool] = None


class Switch(EntryBase):
    pin: Optional[Pin] = None
    type: Optional[str] = Field(None, description="Switch::Type enumerator, e.g. TYPE_MOMENTARY")
    polarity: Optional[str] = Field(None, description="Switch::Polarity enumerator")
    pull: Optional[str] = Field(None, description="Switch::Pull enumerator")


class MidiHandler(EntryBase):
    pass


class SpiTransportConfig(BaseModel):
    model_config = ConfigDict(extra="allow")

    pin_dc: Optional[Pin] = None
    pin_reset: Optional[Pin] = None


class I2cTransportConfig(BaseModel):
    model_config = ConfigDict(extra="allow")

    address: Optional[Union[int, str]] = Field(None, description="7-bit bus address, e.g. 0x3C")
    peripheral: Optional[str] = Field(None, description="I2CHandle::Config::Peripheral enumerator")
    speed: Optional[str] = Field(None, description="I2CHandle::Config::Speed enumerator")
    pin_sda: Optional[Pin] = None
    pin_scl: Optional[Pin] = None


class OledDisplay(EntryBase):
    driver: Optional[str] = Field(None, description="Driver family, e.g. SSD130x")
    transport: Optional[str] = Field(None, description="4WireSpi or I2c")
    dimensions: Optional[str] = Field(None, description="e.g. 128x64")
    spi_config: Optional[SpiTransportConfig] = Field(None, alias="4_wire_spi_config")
    i2c_config: Optional[I2cTransportConfig] = None


# --- Hardware description ---

class HardwareDescription(BaseModel):
    """Peripheral lists of one hardware build. Missing lists mean none."""
    model_config = ConfigDict(extra="allow")

    analog_controls: Optional[list[AnalogControl]] = None
    cv_inputs: Optional[list[CvInput]] = None
    cv_outputs: Optional[list[CvOutput]] = None
    encoders: Optional[list[Encoder]] = None
    gate_inputs: Optional[list[GateInput]] = None
    gate_outputs: Optional[list[GateOutput]] = None
    leds: Optional[list[Led]] = None
    midi_handlers: Optional[list[MidiHandler]] = None
    oled_displays: Optional[list[OledDisplay]] = None
    rgb_leds: Optional[list[RgbLed]] = None
    switches: Optional[list[Switch]] = None

    def to_document(self) -> dict:
        """Plain dict in the document's own key spelling, unset fields omitted."""
        return self.model_dump(by_alias=True, exclude_none=True)


# --- API Request/Response Models ---

class GenerateHardwareRequest(BaseModel):
    hardware: HardwareDescription
    struct_name: str = Field("Daisy", min_length=1, max_length=64, pattern=r"^[A-Za-z_][A-Za-z0-9_]*$")


class GenerateHardwareFileRequest(GenerateHardwareRequest):
    filename: str = Field("custom_hardware.h", min_length=1, max_length=128,
                          pattern=r"^[A-Za-z0-9_.\-]+$")


class GenerateHardwareResponse(BaseModel):
    source: str
    peripheral_counts: dict[str, int]
    notes: list[str] = []


class PeripheralInfo(BaseModel):
    kind: str
    description: str
    document_keys: list[str]
    phases: list[str]


class PeripheralListResponse(BaseModel):
    peripherals: list[PeripheralInfo]
    total: int
