"""Standard legal wording printed on every rental agreement."""

INSURANCE_DECLARATION = (
    "I DECLARE THAT I have not had a proposal declined, a policy cancelled, nor renewal refused nor been "
    "required to pay an increased premium nor had special conditions imposed by any motor insurer. I have not "
    "been convicted of any motoring offense (other than a maximum of 2 speeding offenses) during the past 5 years "
    "nor had my license suspended during the past 10 years and there is no prosecution pending. I do not have any "
    "physical nor mental defect nor infirmity nor suffer from diabetes, fits nor any heart complaint. I have not "
    "had any accidents and/or claims exceeding £3000 in the past 36 calendar months, and I further declare that "
    "to the best of my knowledge and belief no information has been withheld which would influence the provision "
    "of motor insurance to me and this declaration shall form the basis of the contract of insurance."
)

TERMS_AND_CONDITIONS = (
    "1. YOUR CONTRACT WITH US: When you sign the form you accept the conditions set out in this rental "
    "agreement. Please read this rental agreement carefully.",

    "2. RENTAL PERIOD: You will have the vehicle for the rental period shown in the agreement. We may agree to "
    "extend the rental, but the period may never be more than 30 days.",

    "3. YOUR RESPONSIBILITIES: You must look after the vehicle and the keys to the vehicle. You must always lock "
    "the vehicle when not in use. You must protect the vehicle against bad weather. You must use the correct fuel.",

    "4. CONDITIONS FOR USING THE VEHICLE: The vehicle must only be driven by named drivers with full valid "
    "licenses. You and other drivers must not use the vehicle for hire or reward, for any illegal purpose, for "
    "racing or teaching someone to drive, or under the influence of drugs or alcohol.",

    "5. CHARGES: You will pay rental and other charges, costs/damages from failing conditions, refuelling charges "
    "if fuel is not replaced, all fines and court costs for traffic/parking offences plus administration costs, "
    "repair costs for unrecorded damage and replacement if stolen, loss of income charges if the vehicle is "
    "unavailable, interest on late payments at Barclays base rate + 4%, and VAT and taxes.",

    "6. IN THE EVENT OF AN ACCIDENT: Do NOT admit liability. Collect names/addresses of all involved and "
    "witnesses. Secure the vehicle. Contact police if injury or dispute. Inform rental office and complete "
    "accident form.",

    "7. GOVERNING LAW: The laws of the country in which it is signed governs this agreement.",
)
